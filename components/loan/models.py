"""Loan and repayment models for the database."""

from decimal import Decimal

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric
from sqlalchemy.orm import relationship

from components.core.database import Base, utcnow

# Largest rate interest_rate Numeric(7,4) holds
MAX_RATE = Decimal("999.9999")
MAX_DURATION_MONTHS = 1200


class Loan(Base):
    """Loan issued to a customer. Never mutated after creation."""
    __tablename__ = "loans"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    loan_amount = Column(Numeric(15, 2), nullable=False)
    interest_rate = Column(Numeric(7, 4), nullable=False)  # Annual, in percent
    duration_months = Column(Integer, nullable=False)
    start_date = Column(DateTime, nullable=False, default=utcnow)

    # Relationships
    customer = relationship("Customer", back_populates="loans")
    repayments = relationship("LoanRepayment", back_populates="loan")


class LoanRepayment(Base):
    """Append-only repayment record."""
    __tablename__ = "loan_repayments"

    id = Column(Integer, primary_key=True, index=True)
    loan_id = Column(Integer, ForeignKey("loans.id"), nullable=False, index=True)
    amount_paid = Column(Numeric(15, 2), nullable=False)
    payment_date = Column(DateTime, nullable=False, default=utcnow)

    # Relationships
    loan = relationship("Loan", back_populates="repayments")
