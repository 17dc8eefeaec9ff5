"""
Application settings
"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    # Receipt persistence
    RECEIPT_STORE: str = "sql"  # sql | json
    DATABASE_URL: str = "sqlite:///./data/loanpay.db"
    RECEIPTS_FILE: str = "./data/receipts.json"
    DATA_DIR: str = "./data"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: List[str] = ["https://test-vlkt.onrender.com"]

    # PayNecta
    PAYNECTA_BASE_URL: str = "https://paynecta.co.ke/api/v1"
    PAYNECTA_API_KEY: str = ""
    PAYNECTA_USER_EMAIL: str = ""
    PAYNECTA_CHANNEL_ID: str = "000174"
    PAYNECTA_CALLBACK_URL: str = "https://paynecta.onrender.com/callback"
    PAYNECTA_CUSTOMER_LABEL: str = "Swift Applicant"
    PROVIDER_TIMEOUT_SECONDS: float = 15.0

    # Loans
    DEFAULT_LOAN_AMOUNT: str = "50000"
    RELEASE_HOLD_HOURS: int = 24
    SWEEP_INTERVAL_MINUTES: int = 5
    SWEEPER_ENABLED: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
