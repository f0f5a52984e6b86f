"""Account model for the database."""

from decimal import Decimal

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from components.core.database import Base, utcnow

ACCOUNT_TYPES = ("Savings", "Current")


class Account(Base):
    """Bank account owned by a customer."""
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    account_number = Column(String(32), unique=True, nullable=False, index=True)
    account_type = Column(String(20), nullable=False)
    balance = Column(Numeric(15, 2), nullable=False, default=Decimal("0.00"))
    date_opened = Column(DateTime, nullable=False, default=utcnow)
    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships
    customer = relationship("Customer", back_populates="accounts")
