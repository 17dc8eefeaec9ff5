"""
Domain errors. Each carries the HTTP status it maps to.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from loanpay.schemas import Receipt


class LoanPayError(Exception):
    status_code = 500
    message = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class InvalidPhone(LoanPayError):
    status_code = 400
    message = "Invalid phone format"


class InvalidAmount(LoanPayError):
    status_code = 400
    message = "Amount must be >= 1"


class ReceiptNotFound(LoanPayError):
    status_code = 404
    message = "Receipt not found"


class ProviderError(LoanPayError):
    """The payment processor failed, timed out or declined the request."""
    status_code = 502
    message = "Failed to initialize payment"


class InvalidTransition(LoanPayError):
    status_code = 409
    message = "Status transition not allowed"


class PaymentInitiationFailed(LoanPayError):
    """Raised after an ``error`` receipt has been persisted for a failed push."""
    status_code = 500

    def __init__(self, message: str, receipt: "Receipt"):
        super().__init__(message)
        self.receipt = receipt
