"""
FastAPI dependency providers.
"""
from loanpay.provider import PaynectaClient, build_client
from loanpay.store import store_scope

_client: PaynectaClient | None = None


def get_store():
    """Request-scoped receipt store."""
    with store_scope() as store:
        yield store


def get_provider() -> PaynectaClient:
    global _client
    if _client is None:
        _client = build_client()
    return _client


def close_provider() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None
