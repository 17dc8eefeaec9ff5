"""
Processor callback: move a pending receipt to ``processing`` or ``cancelled``.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from loanpay.errors import InvalidTransition
from loanpay.lifecycle.state_machine import transition
from loanpay.schemas import CallbackPayload, Receipt, ReceiptStatus
from loanpay.store import ReceiptStore

logger = logging.getLogger(__name__)

PAID_NOTE = "Payment received and verified. Funds reserved for disbursement."
FAILED_NOTE = "Payment failed or was cancelled."


def apply_callback(
    store: ReceiptStore,
    payload: CallbackPayload,
    now: Optional[datetime] = None,
) -> Receipt:
    """Apply one processor notification and persist the result.

    A reference the store has never seen is treated as a fresh ``pending``
    record holding only the callback's fields. Receipts that are no longer
    ``pending`` raise :class:`InvalidTransition` and are left untouched.
    """
    reference = payload.external_reference
    if not reference:
        raise InvalidTransition("Callback without external_reference")

    with store.lock:
        existing = store.get(reference)
        if existing is None:
            logger.warning("Callback for unknown reference %s; synthesizing record", reference)
            existing = Receipt(reference=reference, status=ReceiptStatus.PENDING)

        if payload.succeeded:
            if existing.status == ReceiptStatus.PROCESSING:
                logger.info("Duplicate success callback for %s ignored", reference)
                return existing
            updated = transition(
                existing,
                ReceiptStatus.PROCESSING,
                PAID_NOTE,
                now=now,
                transaction_id=(
                    str(payload.transaction_id) if payload.transaction_id is not None else None
                ),
                transaction_code=payload.transaction_code or None,
                customer_name=payload.customer_name or "N/A",
            )
        else:
            updated = transition(
                existing,
                ReceiptStatus.CANCELLED,
                payload.message or FAILED_NOTE,
                now=now,
            )

        store.put(updated)
    logger.info("Receipt %s -> %s", reference, updated.status.value)
    return updated
