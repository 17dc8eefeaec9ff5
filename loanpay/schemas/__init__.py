from loanpay.schemas.receipt import (  # noqa: F401
    CallbackAck,
    CallbackPayload,
    ErrorResponse,
    PayRequest,
    PayResponse,
    Receipt,
    ReceiptResponse,
    ReceiptStatus,
    utcnow,
)
from loanpay.schemas.provider import PaymentInitRequest, PaymentInitResponse  # noqa: F401
