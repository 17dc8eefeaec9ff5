"""
Payment endpoints.

POST /pay       — send an STK push, record a pending receipt
POST /callback  — processor notification, always acknowledged
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError

from loanpay.dependencies import get_provider, get_store
from loanpay.errors import LoanPayError
from loanpay.lifecycle import apply_callback, initiate_payment
from loanpay.lifecycle.initiator import PaymentProvider
from loanpay.schemas import CallbackAck, CallbackPayload, PayRequest, PayResponse
from loanpay.store import ReceiptStore

logger = logging.getLogger(__name__)
router = APIRouter()


# ── POST /pay ────────────────────────────────────────────────────────────
@router.post("/pay", response_model=PayResponse)
def pay(
    req: PayRequest,
    store: ReceiptStore = Depends(get_store),
    provider: PaymentProvider = Depends(get_provider),
):
    logger.info("Pay request: amount=%s loan_amount=%s", req.amount, req.loan_amount)
    receipt = initiate_payment(
        store,
        provider,
        phone=req.phone,
        amount=req.amount,
        loan_amount=req.loan_amount,
    )
    return PayResponse(
        message="STK push sent, check your phone",
        reference=receipt.reference,
        receipt=receipt,
    )


# ── POST /callback ───────────────────────────────────────────────────────
@router.post("/callback", response_model=CallbackAck)
async def callback(request: Request, store: ReceiptStore = Depends(get_store)):
    # The processor retries anything but this exact acknowledgment.
    try:
        body = await request.json()
    except ValueError:
        body = {}
    logger.info("Callback received: %s", body)

    try:
        payload = CallbackPayload.model_validate(body if isinstance(body, dict) else {})
        # store I/O and the store lock stay off the event loop
        await run_in_threadpool(apply_callback, store, payload)
    except (ValidationError, LoanPayError) as e:
        logger.warning("Callback not applied: %s", e)
    except Exception:
        logger.exception("Callback processing failed")
    return CallbackAck()
