"""Pydantic schemas for transaction data validation."""

from datetime import datetime
from typing import List, Optional
from pydantic import Field

from components.account.utils import MAX_AMOUNT
from components.core.schemas import CamelModel


class DepositRequest(CamelModel):
    account_number: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0, le=float(MAX_AMOUNT), allow_inf_nan=False)


class WithdrawRequest(DepositRequest):
    pass


class TransferRequest(CamelModel):
    from_account_number: str = Field(..., min_length=1)
    to_account_number: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0, le=float(MAX_AMOUNT), allow_inf_nan=False)


class BalanceResponse(CamelModel):
    """Schema for the result of a balance mutation."""
    success: bool = True
    message: str
    new_balance: float


class TransactionRecord(CamelModel):
    """One ledger row with account numbers resolved."""
    transaction_id: int
    from_account: Optional[str] = None
    to_account: Optional[str] = None
    transaction_type: str
    amount: float
    transaction_date: datetime


class TransactionList(CamelModel):
    success: bool = True
    transactions: List[TransactionRecord]
