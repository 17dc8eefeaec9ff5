"""
loanpay receipt contracts — Pydantic v2 models shared by the store, the
lifecycle services and the HTTP layer.
"""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReceiptStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    LOAN_RELEASED = "loan_released"
    CANCELLED = "cancelled"
    ERROR = "error"


# ---------------------------------------------------------------------------
# Receipt
# ---------------------------------------------------------------------------

class Receipt(BaseModel):
    """One loan payment, from STK push to release."""

    reference: str
    transaction_id: Optional[str] = None
    transaction_code: Optional[str] = None
    amount: Optional[int] = None
    loan_amount: Optional[str] = None
    phone: Optional[str] = None
    customer_name: Optional[str] = None
    status: ReceiptStatus = ReceiptStatus.PENDING
    status_note: Optional[str] = None
    timestamp: datetime = Field(default_factory=utcnow)

    @field_validator("timestamp")
    @classmethod
    def _aware_timestamp(cls, value: datetime) -> datetime:
        # naive values come back from SQLite; they were written as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("transaction_id", "transaction_code", "loan_amount", mode="before")
    @classmethod
    def _stringify(cls, value):
        if value is None or isinstance(value, str):
            return value
        return str(value)


# ---------------------------------------------------------------------------
# API request / response envelopes
# ---------------------------------------------------------------------------

class PayRequest(BaseModel):
    phone: Optional[str] = None
    amount: Optional[float] = None
    loan_amount: Optional[Union[int, float, str]] = None

    @field_validator("phone", mode="before")
    @classmethod
    def _phone_as_text(cls, value):
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("loan_amount")
    @classmethod
    def _loan_amount_text(cls, value):
        if value is None or value == "":
            return None
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)


class PayResponse(BaseModel):
    success: bool = True
    message: str
    reference: str
    receipt: Receipt


class CallbackPayload(BaseModel):
    """Notification posted by the processor once the payer acts on the push."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    external_reference: Optional[str] = None
    status: Optional[str] = None
    result_code: Optional[Union[int, str]] = Field(default=None, alias="resultCode")
    transaction_id: Optional[Union[str, int]] = None
    transaction_code: Optional[str] = None
    customer_name: Optional[str] = None
    message: Optional[str] = None

    @field_validator("result_code", mode="before")
    @classmethod
    def _bool_is_not_a_code(cls, value):
        # lax int parsing would read false as 0
        if isinstance(value, bool):
            return str(value).lower()
        return value

    @property
    def succeeded(self) -> bool:
        if self.status == "success":
            return True
        return self.result_code is not None and str(self.result_code).strip() == "0"


class CallbackAck(BaseModel):
    ResultCode: int = 0
    ResultDesc: str = "OK"


class ReceiptResponse(BaseModel):
    success: bool = True
    receipt: Receipt


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    receipt: Optional[Receipt] = None
