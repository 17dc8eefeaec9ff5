"""
Release sweep: promote ``processing`` receipts past their holding period.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from loanpay.config import settings
from loanpay.lifecycle.state_machine import transition
from loanpay.schemas import Receipt, ReceiptStatus, utcnow
from loanpay.store import ReceiptStore, store_scope

logger = logging.getLogger(__name__)

RELEASED_NOTE = "Loan has been released to your account."


def release_deadline(receipt: Receipt, hold: timedelta) -> datetime:
    return receipt.timestamp + hold


def release_due_loans(
    store: ReceiptStore,
    now: Optional[datetime] = None,
    hold: Optional[timedelta] = None,
) -> list[str]:
    """Release every ``processing`` receipt whose deadline has been reached.

    The store is written back once per call even when nothing was due.
    Returns the released references.
    """
    now = now or utcnow()
    hold = hold if hold is not None else timedelta(hours=settings.RELEASE_HOLD_HOURS)
    released: list[str] = []

    with store.lock:
        receipts = store.all()
        for reference, receipt in receipts.items():
            if receipt.status != ReceiptStatus.PROCESSING:
                continue
            if now < release_deadline(receipt, hold):
                continue
            receipts[reference] = transition(receipt, ReceiptStatus.LOAN_RELEASED, RELEASED_NOTE, now=now)
            released.append(reference)
            logger.info("Released loan for %s", reference)
        store.save_all(receipts.values())

    logger.info("Release sweep done: %d released, %d receipts scanned", len(released), len(receipts))
    return released


def run_release_sweep() -> list[str]:
    """Scheduler entry point; opens its own store."""
    with store_scope() as store:
        return release_due_loans(store)
