"""
SQLAlchemy-backed receipt store.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from loanpay.models.receipt import ReceiptModel
from loanpay.schemas import Receipt, ReceiptStatus
from loanpay.store.base import ReceiptStore

logger = logging.getLogger(__name__)

_COLUMNS = (
    "reference",
    "transaction_id",
    "transaction_code",
    "amount",
    "loan_amount",
    "phone",
    "customer_name",
    "status_note",
    "timestamp",
)


def _to_schema(row: ReceiptModel) -> Receipt:
    data = {name: getattr(row, name) for name in _COLUMNS}
    data["status"] = ReceiptStatus(row.status)
    return Receipt(**data)


def _to_row(receipt: Receipt) -> ReceiptModel:
    data = {name: getattr(receipt, name) for name in _COLUMNS}
    return ReceiptModel(status=receipt.status.value, **data)


class SqlReceiptStore(ReceiptStore):
    def __init__(self, db: Session):
        self.db = db

    def get(self, reference: str) -> Optional[Receipt]:
        row = self.db.get(ReceiptModel, reference)
        return _to_schema(row) if row else None

    def put(self, receipt: Receipt) -> None:
        try:
            self.db.merge(_to_row(receipt))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def all(self) -> dict[str, Receipt]:
        rows = self.db.query(ReceiptModel).order_by(ReceiptModel.timestamp.desc()).all()
        return {row.reference: _to_schema(row) for row in rows}

    def save_all(self, receipts: Iterable[Receipt]) -> None:
        count = 0
        try:
            for receipt in receipts:
                self.db.merge(_to_row(receipt))
                count += 1
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        logger.debug("Saved %d receipts", count)
