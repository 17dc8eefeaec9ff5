from loanpay.models.receipt import ReceiptModel  # noqa: F401
