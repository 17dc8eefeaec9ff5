from loanpay.rendering.pdf import WATERMARKS, render_receipt_pdf, watermark_for  # noqa: F401
