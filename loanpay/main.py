"""
LoanPay Backend — FastAPI application entry-point.
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from loanpay.config import settings
from loanpay.database import Base, engine
from loanpay.dependencies import close_provider
from loanpay.errors import LoanPayError, PaymentInitiationFailed
from loanpay.schemas import ErrorResponse
from loanpay.store import uses_database

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s  %(name)-30s  %(levelname)-5s  %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: ensure data dir + tables exist
    os.makedirs(settings.DATA_DIR, exist_ok=True)
    if uses_database():
        # Import models so Base.metadata knows about them
        import loanpay.models  # noqa: F401
        Base.metadata.create_all(bind=engine)
    logger.info("Receipt store ready (%s)", settings.RECEIPT_STORE)

    scheduler = None
    if settings.SWEEPER_ENABLED:
        from loanpay.scheduler import build_scheduler
        scheduler = build_scheduler()
        scheduler.start()

    yield

    if scheduler is not None:
        scheduler.shutdown(wait=False)
    close_provider()
    logger.info("Shutting down")


app = FastAPI(
    title="LoanPay",
    description="STK push loan payments → receipts → timed loan release",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Error envelopes ──────────────────────────────────────────────────────
@app.exception_handler(PaymentInitiationFailed)
async def payment_failed_handler(request: Request, exc: PaymentInitiationFailed):
    body = ErrorResponse(error=exc.message, receipt=exc.receipt)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


@app.exception_handler(LoanPayError)
async def loanpay_error_handler(request: Request, exc: LoanPayError):
    body = ErrorResponse(error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json", exclude_none=True))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"success": False, "error": message})


@app.get("/")
async def root():
    return {"service": "LoanPay", "version": "0.1.0", "status": "running"}


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# ── Register API routers ─────────────────────────────────────────────────
from loanpay.routers.payments import router as payments_router  # noqa: E402
from loanpay.routers.receipts import router as receipts_router  # noqa: E402

app.include_router(payments_router, tags=["Payments"])
app.include_router(receipts_router, tags=["Receipts"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("loanpay.main:app", host=settings.HOST, port=settings.PORT)
