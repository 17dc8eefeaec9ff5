"""
Receipt status transitions.

    pending    -> processing | cancelled | error
    processing -> loan_released
    cancelled, loan_released, error are terminal
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from loanpay.errors import InvalidTransition
from loanpay.schemas import Receipt, ReceiptStatus, utcnow

TRANSITIONS: dict[ReceiptStatus, frozenset[ReceiptStatus]] = {
    ReceiptStatus.PENDING: frozenset(
        {ReceiptStatus.PROCESSING, ReceiptStatus.CANCELLED, ReceiptStatus.ERROR}
    ),
    ReceiptStatus.PROCESSING: frozenset({ReceiptStatus.LOAN_RELEASED}),
    ReceiptStatus.CANCELLED: frozenset(),
    ReceiptStatus.LOAN_RELEASED: frozenset(),
    ReceiptStatus.ERROR: frozenset(),
}

TERMINAL = frozenset(status for status, targets in TRANSITIONS.items() if not targets)


def can_transition(current: ReceiptStatus, target: ReceiptStatus) -> bool:
    return target in TRANSITIONS[current]


def transition(
    receipt: Receipt,
    target: ReceiptStatus,
    note: str,
    now: Optional[datetime] = None,
    **changes,
) -> Receipt:
    """Return a copy of ``receipt`` moved to ``target``.

    Raises :class:`InvalidTransition` when the move is not in ``TRANSITIONS``.
    The timestamp is always refreshed.
    """
    if not can_transition(receipt.status, target):
        raise InvalidTransition(
            f"{receipt.reference}: {receipt.status.value} -> {target.value} not allowed"
        )
    update = dict(changes)
    update.update(status=target, status_note=note, timestamp=now or utcnow())
    return receipt.model_copy(update=update)
