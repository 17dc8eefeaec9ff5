"""
SQLAlchemy model for receipt persistence.
"""
from sqlalchemy import Column, DateTime, Integer, String, Text

from loanpay.database import Base


class ReceiptModel(Base):
    __tablename__ = "receipts"

    reference = Column(String, primary_key=True)
    transaction_id = Column(String)
    transaction_code = Column(String)
    amount = Column(Integer)
    loan_amount = Column(String)
    phone = Column(String)
    customer_name = Column(String)
    status = Column(String, nullable=False, default="pending", index=True)
    status_note = Column(Text)
    timestamp = Column(DateTime(timezone=True), nullable=False)
