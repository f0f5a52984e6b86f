"""Pydantic schemas for account data validation."""

from datetime import datetime
from typing import List, Literal
from pydantic import Field

from components.account.utils import MAX_AMOUNT
from components.core.schemas import CamelModel


class AccountCreate(CamelModel):
    """Schema for opening an account."""
    account_type: Literal["Savings", "Current"]
    initial_deposit: float = Field(0, ge=0, le=float(MAX_AMOUNT), allow_inf_nan=False)


class Account(CamelModel):
    """Schema for account response."""
    id: int
    account_number: str
    account_type: str
    balance: float
    date_opened: datetime
    is_active: bool


class AccountList(CamelModel):
    success: bool = True
    accounts: List[Account]


class AccountBalance(CamelModel):
    success: bool = True
    balance: float
    account_type: str


class AccountCreated(CamelModel):
    success: bool = True
    message: str
    account_number: str
    account_type: str
    balance: float
