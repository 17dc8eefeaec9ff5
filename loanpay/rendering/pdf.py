"""
Loan receipt PDF.

Header band, detail block, optional status note and a faint status
watermark, drawn straight onto a reportlab canvas.
"""
import io
import logging
from typing import NamedTuple

from reportlab.lib import colors
from reportlab.lib.colors import Color
from reportlab.lib.pagesizes import letter
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from loanpay.schemas import Receipt, ReceiptStatus

logger = logging.getLogger(__name__)

HEADER_COLOR = colors.HexColor("#2196F3")
NOTE_COLOR = colors.HexColor("#555555")
TITLE = "PayNecta Loan Receipt"
MARGIN = 50
HEADER_HEIGHT = 80
BODY_FONT = "Helvetica"
BODY_SIZE = 12
LINE_HEIGHT = 18


class Watermark(NamedTuple):
    text: str
    color: Color


WATERMARKS: dict[ReceiptStatus, Watermark] = {
    ReceiptStatus.PENDING: Watermark("PENDING", colors.grey),
    ReceiptStatus.PROCESSING: Watermark("PROCESSING", colors.blue),
    ReceiptStatus.LOAN_RELEASED: Watermark("RELEASED", colors.green),
    ReceiptStatus.CANCELLED: Watermark("FAILED", colors.red),
}
DEFAULT_WATERMARK = WATERMARKS[ReceiptStatus.PENDING]


def watermark_for(status) -> Watermark:
    """Lookup with the pending appearance as fallback (covers ``error``)."""
    return WATERMARKS.get(status, DEFAULT_WATERMARK)


def format_timestamp(receipt: Receipt) -> str:
    return receipt.timestamp.strftime("%d %b %Y, %H:%M:%S %Z").strip()


def receipt_details(receipt: Receipt) -> list[tuple[str, str]]:
    def text(value) -> str:
        return "N/A" if value is None else str(value)

    return [
        ("Reference", receipt.reference),
        ("Amount", f"KSH {text(receipt.amount)}"),
        ("Loan Amount", f"KSH {text(receipt.loan_amount)}"),
        ("Phone", text(receipt.phone)),
        ("Status", receipt.status.value.upper()),
        ("Time", format_timestamp(receipt)),
    ]


def wrap_note(note: str, width: float) -> list[str]:
    """Split a status note into lines no wider than ``width`` points."""
    return simpleSplit(note, BODY_FONT, BODY_SIZE, width)


def render_receipt_pdf(receipt: Receipt, compress: bool = True) -> bytes:
    """Render one receipt snapshot to PDF bytes."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=letter, pageCompression=1 if compress else 0)
    pdf.setTitle(f"Receipt {receipt.reference}")
    width, height = letter

    # Header band
    pdf.setFillColor(HEADER_COLOR)
    pdf.rect(0, height - HEADER_HEIGHT, width, HEADER_HEIGHT, stroke=0, fill=1)
    pdf.setFillColor(colors.white)
    pdf.setFont("Helvetica-Bold", 24)
    pdf.drawString(MARGIN, height - 50, TITLE)

    # Details
    y = height - HEADER_HEIGHT - 50
    pdf.setFillColor(colors.black)
    pdf.setFont("Helvetica-Bold", 14)
    pdf.drawString(MARGIN, y, "Receipt Details")
    pdf.line(MARGIN, y - 3, MARGIN + pdf.stringWidth("Receipt Details", "Helvetica-Bold", 14), y - 3)
    y -= 28

    pdf.setFont(BODY_FONT, BODY_SIZE)
    for label, value in receipt_details(receipt):
        pdf.drawString(MARGIN, y, f"{label}: {value}")
        y -= LINE_HEIGHT

    if receipt.status_note:
        y -= 10
        pdf.setFillColor(NOTE_COLOR)
        for line in wrap_note(receipt.status_note, width - 2 * MARGIN):
            pdf.drawString(MARGIN, y, line)
            y -= LINE_HEIGHT

    # Watermark
    mark = watermark_for(receipt.status)
    pdf.saveState()
    pdf.setFillColor(mark.color, alpha=0.2)
    pdf.setFont("Helvetica-Bold", 50)
    pdf.drawString(150, height - 400, mark.text)
    pdf.restoreState()

    pdf.showPage()
    pdf.save()
    logger.info("Rendered PDF for %s (%s)", receipt.reference, mark.text)
    return buffer.getvalue()
