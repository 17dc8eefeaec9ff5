"""
Flat-file receipt store.

The whole mapping lives in one pretty-printed JSON object keyed by reference.
Every read loads the full file; every write replaces it atomically.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterable, Optional

from loanpay.schemas import Receipt
from loanpay.store.base import ReceiptStore

logger = logging.getLogger(__name__)


class JsonFileReceiptStore(ReceiptStore):
    def __init__(self, path: str | os.PathLike):
        self.path = Path(path).resolve()

    # -- snapshot I/O -----------------------------------------------------
    def _read(self) -> dict[str, dict]:
        if not self.path.exists():
            return {}
        raw = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        if not isinstance(raw, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return raw

    def _write(self, data: dict[str, dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=str(self.path.parent),
            prefix=f".{self.path.name}.",
            suffix=".tmp",
            delete=False,
        ) as handle:
            json.dump(data, handle, indent=2, ensure_ascii=False)
            handle.flush()
            os.fsync(handle.fileno())
            tmp_name = handle.name
        os.replace(tmp_name, self.path)

    # -- ReceiptStore -----------------------------------------------------
    def get(self, reference: str) -> Optional[Receipt]:
        record = self._read().get(reference)
        return Receipt.model_validate(record) if record is not None else None

    def put(self, receipt: Receipt) -> None:
        with self.lock:
            data = self._read()
            data[receipt.reference] = receipt.model_dump(mode="json")
            self._write(data)

    def all(self) -> dict[str, Receipt]:
        return {ref: Receipt.model_validate(rec) for ref, rec in self._read().items()}

    def save_all(self, receipts: Iterable[Receipt]) -> None:
        with self.lock:
            data = self._read()
            for receipt in receipts:
                data[receipt.reference] = receipt.model_dump(mode="json")
            self._write(data)
        logger.debug("Rewrote %s (%d receipts)", self.path, len(data))
