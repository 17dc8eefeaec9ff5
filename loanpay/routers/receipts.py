"""
Receipt endpoints.

GET /receipt/{reference}      — one receipt
GET /receipt/{reference}/pdf  — receipt as a PDF download
GET /receipts                 — all receipts, newest first
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from loanpay.dependencies import get_store
from loanpay.errors import ReceiptNotFound
from loanpay.rendering import render_receipt_pdf
from loanpay.schemas import Receipt, ReceiptResponse, ReceiptStatus
from loanpay.store import ReceiptStore

logger = logging.getLogger(__name__)
router = APIRouter()


def _load(store: ReceiptStore, reference: str) -> Receipt:
    receipt = store.get(reference)
    if receipt is None:
        logger.warning("Receipt not found: %s", reference)
        raise ReceiptNotFound()
    return receipt


# ── GET /receipt/{reference} ─────────────────────────────────────────────
@router.get("/receipt/{reference}", response_model=ReceiptResponse)
def get_receipt(reference: str, store: ReceiptStore = Depends(get_store)):
    return ReceiptResponse(receipt=_load(store, reference))


# ── GET /receipt/{reference}/pdf ─────────────────────────────────────────
@router.get("/receipt/{reference}/pdf")
def get_receipt_pdf(reference: str, store: ReceiptStore = Depends(get_store)):
    receipt = _load(store, reference)
    return Response(
        content=render_receipt_pdf(receipt),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=receipt-{receipt.reference}.pdf"},
    )


# ── GET /receipts ────────────────────────────────────────────────────────
@router.get("/receipts", response_model=list[Receipt])
def list_receipts(status: Optional[ReceiptStatus] = None, store: ReceiptStore = Depends(get_store)):
    receipts = sorted(store.all().values(), key=lambda r: r.timestamp, reverse=True)
    if status:
        receipts = [r for r in receipts if r.status == status]
    logger.info("Found %d receipts", len(receipts))
    return receipts
