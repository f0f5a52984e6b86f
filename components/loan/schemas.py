"""Pydantic schemas for loan data validation."""

from datetime import datetime
from typing import List
from pydantic import Field

from components.account.utils import MAX_AMOUNT
from components.core.schemas import CamelModel
from components.loan.models import MAX_DURATION_MONTHS, MAX_RATE


class LoanRequest(CamelModel):
    """Schema for loan application and simulation input."""
    loan_amount: float = Field(..., gt=0, le=float(MAX_AMOUNT), allow_inf_nan=False)
    interest_rate: float = Field(..., gt=0, le=float(MAX_RATE), allow_inf_nan=False)
    duration_months: int = Field(..., gt=0, le=MAX_DURATION_MONTHS)


class RepaymentRequest(CamelModel):
    amount: float = Field(..., gt=0, le=float(MAX_AMOUNT), allow_inf_nan=False)


class ScheduleItem(CamelModel):
    """Schema for one month of an amortization schedule."""
    month: int
    payment: float
    principal: float
    interest: float
    balance: float


class SimulationSummary(CamelModel):
    monthly_payment: float
    total_interest: float
    total_repayment: float


class SimulationResponse(CamelModel):
    """Schema for loan simulation response."""
    success: bool = True
    summary: SimulationSummary
    schedule: List[ScheduleItem]


class Repayment(CamelModel):
    """Schema for a stored repayment."""
    id: int
    amount_paid: float
    payment_date: datetime


class Loan(CamelModel):
    """Schema for a stored loan annotated with derived amounts."""
    id: int
    loan_amount: float
    interest_rate: float
    duration_months: int
    start_date: datetime
    total_paid: float = 0
    monthly_payment: float
    total_repayment: float
    remaining_balance: float
    is_fully_paid: bool


class LoanDetail(Loan):
    repayments: List[Repayment] = []


class AppliedLoan(CamelModel):
    id: int
    loan_amount: float
    interest_rate: float
    duration_months: int
    start_date: datetime
    monthly_payment: float
    total_repayment: float
    account_credited: str
    new_balance: float


class LoanApplicationResponse(CamelModel):
    success: bool = True
    message: str
    loan: AppliedLoan


class LoanList(CamelModel):
    success: bool = True
    loans: List[Loan]


class LoanDetailResponse(CamelModel):
    success: bool = True
    loan: LoanDetail


class RepaymentResponse(CamelModel):
    """Schema for loan repayment response."""
    success: bool = True
    message: str
    amount_paid: float
    remaining_balance: float
    is_fully_paid: bool
    account_debited: str
    new_account_balance: float


class LoansSummary(CamelModel):
    """Aggregate loan figures for the dashboard."""
    total_loans: int = 0
    total_borrowed: float = 0
    total_repaid: float = 0
    total_outstanding: float = 0
