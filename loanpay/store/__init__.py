"""
Receipt persistence backends.
"""
from contextlib import contextmanager

from loanpay.config import settings
from loanpay.store.base import ReceiptStore
from loanpay.store.json_file import JsonFileReceiptStore
from loanpay.store.sql import SqlReceiptStore

__all__ = [
    "JsonFileReceiptStore",
    "ReceiptStore",
    "SqlReceiptStore",
    "build_store",
    "store_scope",
    "uses_database",
]


def uses_database() -> bool:
    if settings.RECEIPT_STORE not in ("sql", "json"):
        raise ValueError(f"Unknown RECEIPT_STORE: {settings.RECEIPT_STORE!r}")
    return settings.RECEIPT_STORE == "sql"


def build_store(db=None) -> ReceiptStore:
    """Return the configured backend. ``db`` is required for the sql backend."""
    if not uses_database():
        return JsonFileReceiptStore(settings.RECEIPTS_FILE)
    if db is None:
        raise ValueError("sql receipt store needs a database session")
    return SqlReceiptStore(db)


@contextmanager
def store_scope():
    """Configured store; the sql backend gets a private session."""
    if not uses_database():
        yield build_store()
        return

    from loanpay.database import SessionLocal

    db = SessionLocal()
    try:
        yield build_store(db)
    finally:
        db.close()
