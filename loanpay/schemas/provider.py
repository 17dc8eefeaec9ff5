"""
PayNecta payment-initialization wire contract.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class PaymentInitRequest(BaseModel):
    amount: int
    phone_number: str
    external_reference: str
    customer_name: str
    callback_url: str
    channel_id: str


class PaymentInitResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool = False
    transaction_id: Optional[str] = None
    message: Optional[str] = None

    @field_validator("transaction_id", mode="before")
    @classmethod
    def _id_as_text(cls, value):
        if value is None or isinstance(value, str):
            return value
        return str(value)
