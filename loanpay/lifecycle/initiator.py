"""
Payment initiation: validate, send the STK push, record the receipt.
"""
from __future__ import annotations

import logging
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Protocol, Union

from loanpay.config import settings
from loanpay.errors import InvalidAmount, InvalidPhone, PaymentInitiationFailed
from loanpay.lifecycle.phone import normalize_phone
from loanpay.schemas import (
    PaymentInitRequest,
    PaymentInitResponse,
    Receipt,
    ReceiptStatus,
    utcnow,
)
from loanpay.store import ReceiptStore

logger = logging.getLogger(__name__)

ERROR_NOTE = "System error occurred. Please try again later."

Number = Union[int, float, Decimal]


class PaymentProvider(Protocol):
    def initialize_payment(self, request: PaymentInitRequest) -> PaymentInitResponse:
        ...


def round_amount(amount: Number) -> int:
    """Round half away from zero, the way the processor expects whole shillings."""
    return int(Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _rounded_or_none(amount) -> Optional[int]:
    try:
        return round_amount(amount)
    except (InvalidOperation, TypeError, ValueError):
        return None


# References handed out but not yet persisted; guarded by the store lock.
_reserved: set[str] = set()


def new_reference(store: ReceiptStore, now: Optional[datetime] = None) -> str:
    """Reserve ``ORDER-<epoch millis>``, bumped by a millisecond until unused.

    The caller releases the reservation with :func:`release_reference` once
    the receipt is stored.
    """
    millis = int((now or utcnow()).timestamp() * 1000)
    with store.lock:
        while f"ORDER-{millis}" in _reserved or f"ORDER-{millis}" in store:
            millis += 1
        reference = f"ORDER-{millis}"
        _reserved.add(reference)
    return reference


def release_reference(store: ReceiptStore, reference: Optional[str]) -> None:
    with store.lock:
        _reserved.discard(reference)


def initiate_payment(
    store: ReceiptStore,
    provider: PaymentProvider,
    phone: Optional[str],
    amount: Optional[Number],
    loan_amount: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Receipt:
    """Send an STK push and persist a ``pending`` receipt.

    Raises ``InvalidPhone``/``InvalidAmount`` before any side effect. Any
    later failure persists an ``error`` receipt and raises
    ``PaymentInitiationFailed`` carrying it.
    """
    formatted_phone = normalize_phone(phone)
    if not formatted_phone:
        raise InvalidPhone()
    if amount is None or amount < 1:
        raise InvalidAmount()

    loan_amount = loan_amount or settings.DEFAULT_LOAN_AMOUNT
    reference: Optional[str] = None
    try:
        try:
            reference = new_reference(store, now)
            rounded = round_amount(amount)
            request = PaymentInitRequest(
                amount=rounded,
                phone_number=formatted_phone,
                external_reference=reference,
                customer_name=settings.PAYNECTA_CUSTOMER_LABEL,
                callback_url=settings.PAYNECTA_CALLBACK_URL,
                channel_id=settings.PAYNECTA_CHANNEL_ID,
            )
            result = provider.initialize_payment(request)

            receipt = Receipt(
                reference=reference,
                transaction_id=result.transaction_id,
                transaction_code=None,
                amount=rounded,
                loan_amount=loan_amount,
                phone=formatted_phone,
                customer_name="N/A",
                status=ReceiptStatus.PENDING,
                status_note=(
                    f"STK push sent to {formatted_phone}. "
                    "Please enter your M-Pesa PIN to complete the payment."
                ),
                timestamp=now or utcnow(),
            )
            store.put(receipt)
            logger.info("STK push sent: %s -> %s (KSH %d)", reference, formatted_phone, rounded)
            return receipt
        except Exception as exc:
            logger.exception("Payment initiation error for %s", reference or formatted_phone)
            if reference is None:
                reference = new_reference(store, now)
            error_receipt = Receipt(
                reference=reference,
                transaction_id=None,
                amount=_rounded_or_none(amount),
                loan_amount=loan_amount,
                phone=formatted_phone,
                status=ReceiptStatus.ERROR,
                status_note=ERROR_NOTE,
                timestamp=now or utcnow(),
            )
            store.put(error_receipt)
            raise PaymentInitiationFailed(str(exc) or type(exc).__name__, error_receipt) from exc
    finally:
        release_reference(store, reference)
