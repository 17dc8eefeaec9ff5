"""
Shared pytest fixtures — in-memory SQLite + FastAPI TestClient + fake processor.
"""
import os
import tempfile

os.environ.setdefault("SWEEPER_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="loanpay-test-"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from loanpay.database import Base  # noqa: E402
from loanpay.dependencies import get_provider, get_store  # noqa: E402
from loanpay.errors import ProviderError  # noqa: E402
from loanpay.main import app  # noqa: E402
from loanpay.models import ReceiptModel  # noqa: E402,F401  — register model
from loanpay.schemas import PaymentInitResponse  # noqa: E402
from loanpay.store import SqlReceiptStore  # noqa: E402

# StaticPool ensures all connections share the same in-memory database
_ENGINE = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
_Session = sessionmaker(autocommit=False, autoflush=False, bind=_ENGINE)


class FakeProvider:
    """Stands in for PaynectaClient; records every request it is sent."""

    def __init__(self):
        self.requests = []
        self.response = PaymentInitResponse(success=True, transaction_id="TXN-1")
        self.error = None

    def initialize_payment(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response

    def fail_with(self, message="Failed to initialize payment"):
        self.error = ProviderError(message)


@pytest.fixture(autouse=True)
def _reset_tables():
    Base.metadata.create_all(bind=_ENGINE)
    yield
    Base.metadata.drop_all(bind=_ENGINE)


@pytest.fixture()
def db():
    session = _Session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def store(db):
    return SqlReceiptStore(db)


@pytest.fixture()
def provider():
    return FakeProvider()


@pytest.fixture()
def client(store, provider):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_provider] = lambda: provider
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
