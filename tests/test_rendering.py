"""
Receipt PDF rendering.
"""
from datetime import datetime, timezone

import pytest
from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.pdfbase.pdfmetrics import stringWidth

from loanpay.rendering import render_receipt_pdf, watermark_for
from loanpay.rendering.pdf import BODY_FONT, BODY_SIZE, MARGIN, receipt_details, wrap_note
from loanpay.schemas import Receipt, ReceiptStatus


def _receipt(status, **fields):
    return Receipt(
        reference="ORDER-1792324800000",
        amount=1500,
        loan_amount="50000",
        phone="254712345678",
        status=status,
        timestamp=datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc),
        **fields,
    )


@pytest.mark.parametrize(
    "status, text, color",
    [
        (ReceiptStatus.PENDING, "PENDING", colors.grey),
        (ReceiptStatus.PROCESSING, "PROCESSING", colors.blue),
        (ReceiptStatus.LOAN_RELEASED, "RELEASED", colors.green),
        (ReceiptStatus.CANCELLED, "FAILED", colors.red),
        (ReceiptStatus.ERROR, "PENDING", colors.grey),
        ("something-else", "PENDING", colors.grey),
    ],
)
def test_watermark_lookup(status, text, color):
    mark = watermark_for(status)
    assert mark.text == text
    assert mark.color == color


def test_details_block():
    details = dict(receipt_details(_receipt(ReceiptStatus.LOAN_RELEASED)))
    assert details["Amount"] == "KSH 1500"
    assert details["Loan Amount"] == "KSH 50000"
    assert details["Status"] == "LOAN_RELEASED"
    assert details["Time"] == "18 Oct 2026, 12:00:00 UTC"


def test_details_tolerate_sparse_receipt():
    details = dict(receipt_details(Receipt(reference="ORDER-x", status=ReceiptStatus.PROCESSING)))
    assert details["Amount"] == "KSH N/A"
    assert details["Phone"] == "N/A"


def test_cancelled_renders_failed_watermark():
    pdf = render_receipt_pdf(_receipt(ReceiptStatus.CANCELLED, status_note="Request cancelled by user"), compress=False)
    assert pdf.startswith(b"%PDF")
    assert b"(FAILED)" in pdf
    assert b"(RELEASED)" not in pdf


def test_released_renders_released_watermark():
    pdf = render_receipt_pdf(_receipt(ReceiptStatus.LOAN_RELEASED), compress=False)
    assert b"(RELEASED)" in pdf
    assert b"(FAILED)" not in pdf


def test_compressed_output_is_pdf():
    assert render_receipt_pdf(_receipt(ReceiptStatus.PENDING)).startswith(b"%PDF")


LONG_NOTE = (
    "STK push sent to 254712345678. Please enter your M-Pesa PIN to complete the payment. "
    "If no prompt appears within a minute, retry from the loan page."
)


def test_long_note_wrapped_to_page_width():
    width = letter[0] - 2 * MARGIN
    lines = wrap_note(LONG_NOTE, width)
    assert len(lines) > 1
    assert all(stringWidth(line, BODY_FONT, BODY_SIZE) <= width for line in lines)
    assert " ".join(lines) == LONG_NOTE


def test_long_note_drawn_line_by_line():
    pdf = render_receipt_pdf(_receipt(ReceiptStatus.PENDING, status_note=LONG_NOTE), compress=False)
    width = letter[0] - 2 * MARGIN
    for line in wrap_note(LONG_NOTE, width):
        assert f"({line})".encode() in pdf
