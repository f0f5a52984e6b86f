"""Customer model for the database."""

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from components.core.database import Base, utcnow


class Customer(Base):
    """Customer model representing a bank client."""
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    phone = Column(String(30), nullable=True)
    address = Column(String(255), nullable=True)
    user_role = Column(String(20), nullable=False, default="Customer")
    date_created = Column(DateTime, nullable=False, default=utcnow)
    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships
    accounts = relationship("Account", back_populates="customer")
    loans = relationship("Loan", back_populates="customer")
