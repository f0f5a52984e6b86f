"""Repository for loan operations."""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.models import Account
from components.account.repository import AccountRepository
from components.account.utils import MAX_AMOUNT, to_money
from components.core.exceptions import (
    EntityNotFoundError,
    InvalidArgumentError,
    RepaymentExceedsBalanceError,
)
from components.loan import amortization
from components.loan.models import MAX_DURATION_MONTHS, MAX_RATE, Loan, LoanRepayment

logger = logging.getLogger(__name__)

RATE_STEP = Decimal("0.0001")


@dataclass
class RepaymentResult:
    amount_paid: Decimal
    remaining_balance: float
    is_fully_paid: bool
    account_number: str
    new_account_balance: Decimal


def loan_figures(loan: Loan, total_paid=0) -> Dict:
    """
    Derived amounts for a stored loan given what has been repaid so far.

    Returned values are rounded to cents; the remaining balance is floored
    at 0 for display.
    """
    principal = float(loan.loan_amount)
    rate = float(loan.interest_rate)
    months = int(loan.duration_months)
    terms = amortization.summarize_loan(principal, rate, months)
    remaining = amortization.remaining_balance(principal, rate, months, float(total_paid))
    return {
        "total_paid": round(float(total_paid), 2),
        "monthly_payment": round(terms.monthly_payment, 2),
        "total_repayment": round(terms.total_repayment, 2),
        "remaining_balance": round(max(remaining, 0.0), 2),
        "is_fully_paid": amortization.is_fully_paid(remaining),
    }


class LoanRepository:
    """Repository for loan operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session
        self.accounts = AccountRepository(session)

    async def apply(
        self,
        customer_id: int,
        loan_amount: float,
        interest_rate: float,
        duration_months: int,
    ) -> Tuple[Loan, Account]:
        """
        Create a loan and credit its principal to the customer's primary account.

        The loan row and the deposit are committed together.

        Raises:
            InvalidArgumentError: amount, rate or duration out of range
            EntityNotFoundError: the customer has no active account
        """
        # Validates all three inputs
        amortization.compute_monthly_payment(loan_amount, interest_rate, duration_months)
        principal = to_money(loan_amount)
        try:
            rate = Decimal(str(interest_rate)).quantize(RATE_STEP)
        except InvalidOperation:
            raise InvalidArgumentError(f"Invalid interest rate: {interest_rate}")
        if principal <= 0:
            raise InvalidArgumentError("Loan amount must be greater than 0")
        if principal > MAX_AMOUNT:
            raise InvalidArgumentError(f"Loan amount cannot exceed {MAX_AMOUNT}")
        if rate <= 0:
            raise InvalidArgumentError("Interest rate must be greater than 0")
        if rate > MAX_RATE:
            raise InvalidArgumentError(f"Interest rate cannot exceed {MAX_RATE}")
        if duration_months > MAX_DURATION_MONTHS:
            raise InvalidArgumentError(f"Duration cannot exceed {MAX_DURATION_MONTHS} months")

        account = await self.accounts.get_primary(customer_id)
        if account is None:
            raise EntityNotFoundError("No active account found. Please create an account first.")

        try:
            loan = Loan(
                customer_id=customer_id,
                loan_amount=principal,
                interest_rate=rate,
                duration_months=duration_months,
            )
            self.session.add(loan)
            await self.session.flush()
            account = await self.accounts.deposit(account.account_number, principal, commit=False)
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        logger.info("Loan %s of %s disbursed to account %s", loan.id, principal, account.account_number)
        return loan, account

    async def get_loans_with_totals(self, customer_id: int) -> List[Tuple[Loan, Decimal]]:
        """All loans of a customer with the sum repaid on each, newest first."""
        total_paid = func.coalesce(func.sum(LoanRepayment.amount_paid), 0)
        result = await self.session.execute(
            select(Loan, total_paid)
            .outerjoin(LoanRepayment, LoanRepayment.loan_id == Loan.id)
            .where(Loan.customer_id == customer_id)
            .group_by(Loan.id)
            .order_by(Loan.start_date.desc(), Loan.id.desc())
        )
        return [(loan, Decimal(str(paid))) for loan, paid in result.all()]

    async def get_owned(self, loan_id: int, customer_id: int, lock: bool = False) -> Optional[Loan]:
        """Get a loan only if it belongs to the customer."""
        query = select(Loan).where(Loan.id == loan_id, Loan.customer_id == customer_id)
        if lock:
            query = query.with_for_update()
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_total_paid(self, loan_id: int) -> Decimal:
        result = await self.session.execute(
            select(func.coalesce(func.sum(LoanRepayment.amount_paid), 0))
            .where(LoanRepayment.loan_id == loan_id)
        )
        return Decimal(str(result.scalar()))

    async def get_repayments(self, loan_id: int) -> List[LoanRepayment]:
        """Repayment history of a loan, newest first."""
        result = await self.session.execute(
            select(LoanRepayment)
            .where(LoanRepayment.loan_id == loan_id)
            .order_by(LoanRepayment.payment_date.desc(), LoanRepayment.id.desc())
        )
        return list(result.scalars().all())

    async def repay(self, loan_id: int, customer_id: int, amount: float) -> RepaymentResult:
        """
        Pay towards a loan from the customer's primary account.

        The amount may not exceed the remaining balance (both compared in
        cents). The account debit and the repayment record are committed
        together.

        Raises:
            InvalidArgumentError: non-positive amount
            EntityNotFoundError: unknown loan or no active account
            RepaymentExceedsBalanceError: amount larger than what is owed
            InsufficientFundsError: account balance too low
        """
        value = to_money(amount)
        if value <= 0:
            raise InvalidArgumentError("Payment amount must be greater than 0")

        try:
            loan = await self.get_owned(loan_id, customer_id, lock=True)
            if loan is None:
                raise EntityNotFoundError("Loan not found or access denied")

            total_paid = await self.get_total_paid(loan.id)
            remaining = amortization.remaining_balance(
                float(loan.loan_amount),
                float(loan.interest_rate),
                int(loan.duration_months),
                float(total_paid),
            )
            if value > to_money(max(remaining, 0.0)):
                raise RepaymentExceedsBalanceError(max(remaining, 0.0))

            account = await self.accounts.get_primary(customer_id)
            if account is None:
                raise EntityNotFoundError("No active account found")

            account = await self.accounts.withdraw(account.account_number, value, commit=False)
            self.session.add(LoanRepayment(loan_id=loan.id, amount_paid=value))
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise

        new_remaining = remaining - float(value)
        logger.info("Repayment of %s on loan %s, remaining %.2f", value, loan.id, new_remaining)
        return RepaymentResult(
            amount_paid=value,
            remaining_balance=round(max(new_remaining, 0.0), 2),
            is_fully_paid=amortization.is_fully_paid(new_remaining),
            account_number=account.account_number,
            new_account_balance=Decimal(account.balance),
        )
