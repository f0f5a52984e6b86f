"""Pydantic schemas for customer data validation."""

from datetime import datetime
from typing import List, Optional
from pydantic import EmailStr, Field, field_validator

from components.account.schemas import Account
from components.core.schemas import CamelModel
from components.loan.schemas import LoansSummary
from components.transaction.schemas import TransactionRecord


def _normalize_email(value):
    if isinstance(value, str):
        value = value.strip().lower()
    return value


class SignupRequest(CamelModel):
    """Schema for customer registration."""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6)
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = Field(None, max_length=255)

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_name(cls, value):
        if isinstance(value, str):
            value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value)


class LoginRequest(CamelModel):
    """Schema for customer login."""
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        return _normalize_email(value)


class ProfileUpdate(CamelModel):
    """Schema for profile update."""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)
    address: Optional[str] = Field(None, max_length=255)

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def strip_name(cls, value):
        if isinstance(value, str):
            value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class CustomerSummary(CamelModel):
    """Customer fields returned alongside a token."""
    id: int
    first_name: str
    last_name: str
    email: str
    user_role: str = "Customer"


class CustomerProfile(CustomerSummary):
    """Full customer profile."""
    phone: Optional[str] = None
    address: Optional[str] = None
    date_created: datetime
    is_active: bool


class AuthResponse(CamelModel):
    """Schema for signup/login response."""
    success: bool = True
    message: str
    token: str
    customer: CustomerSummary


class ProfileResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
    customer: CustomerProfile


class Dashboard(CamelModel):
    accounts: List[Account]
    total_balance: float
    recent_transactions: List[TransactionRecord]
    loans_summary: LoansSummary


class DashboardResponse(CamelModel):
    success: bool = True
    dashboard: Dashboard
