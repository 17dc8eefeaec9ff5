"""
Receipt store contract.
"""
from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from loanpay.schemas import Receipt

# One lock per process: every backend points at a single authoritative store.
_STORE_LOCK = threading.RLock()


class ReceiptStore(ABC):
    """Mapping of reference -> receipt.

    Callers that read, modify and write back must hold :attr:`lock` for the
    whole sequence.
    """

    lock = _STORE_LOCK

    @abstractmethod
    def get(self, reference: str) -> Optional[Receipt]:
        ...

    @abstractmethod
    def put(self, receipt: Receipt) -> None:
        ...

    @abstractmethod
    def all(self) -> dict[str, Receipt]:
        ...

    @abstractmethod
    def save_all(self, receipts: Iterable[Receipt]) -> None:
        """Persist a batch with a single write."""

    def __contains__(self, reference: str) -> bool:
        return self.get(reference) is not None
