"""Loan endpoints for the API."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.exceptions import (
    EntityNotFoundError,
    InsufficientFundsError,
    InvalidArgumentError,
    RepaymentExceedsBalanceError,
)
from components.core.init_db import get_db
from components.customer.models import Customer
from components.loan import amortization, schemas
from components.loan.repository import LoanRepository, loan_figures
from restapi.endpoints.auth import get_current_customer

router = APIRouter(
    prefix="/loans",
    tags=["loans"],
    responses={404: {"description": "Not found"}},
)


@router.post("/simulate", response_model=schemas.SimulationResponse)
async def simulate_loan(request: schemas.LoanRequest):
    """
    Simulate a loan repayment schedule. No authentication required.

    Returns:
    - summary: monthly payment, total interest and total repayment
    - schedule: one entry per month with payment, principal, interest and
      remaining balance
    """
    try:
        terms = amortization.summarize_loan(
            request.loan_amount, request.interest_rate, request.duration_months
        )
        schedule = amortization.build_schedule(
            request.loan_amount, request.interest_rate, request.duration_months
        )
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return schemas.SimulationResponse(
        summary=schemas.SimulationSummary(
            monthly_payment=round(terms.monthly_payment, 2),
            total_interest=round(terms.total_interest, 2),
            total_repayment=round(terms.total_repayment, 2),
        ),
        schedule=[schemas.ScheduleItem.model_validate(entry) for entry in schedule],
    )


@router.post("", response_model=schemas.LoanApplicationResponse, status_code=status.HTTP_201_CREATED)
async def apply_for_loan(
    request: schemas.LoanRequest,
    db: AsyncSession = Depends(get_db),
    current_customer: Customer = Depends(get_current_customer)
):
    """Apply for a loan; the principal is credited to the customer's primary account."""
    try:
        loan, account = await LoanRepository(db).apply(
            current_customer.id,
            request.loan_amount,
            request.interest_rate,
            request.duration_months,
        )
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    figures = loan_figures(loan)
    return schemas.LoanApplicationResponse(
        message=(
            f"Loan approved! ₦{float(loan.loan_amount):.2f} has been added "
            f"to your account {account.account_number}"
        ),
        loan=schemas.AppliedLoan(
            id=loan.id,
            loan_amount=float(loan.loan_amount),
            interest_rate=float(loan.interest_rate),
            duration_months=loan.duration_months,
            start_date=loan.start_date,
            monthly_payment=figures["monthly_payment"],
            total_repayment=figures["total_repayment"],
            account_credited=account.account_number,
            new_balance=float(account.balance),
        ),
    )


@router.get("", response_model=schemas.LoanList)
async def read_loans(
    db: AsyncSession = Depends(get_db),
    current_customer: Customer = Depends(get_current_customer)
):
    """
    Get all loans of the logged-in customer, newest first.

    Each loan carries totalPaid, monthlyPayment, totalRepayment and
    remainingBalance.
    """
    loans = await LoanRepository(db).get_loans_with_totals(current_customer.id)
    return schemas.LoanList(
        loans=[
            schemas.Loan(
                id=loan.id,
                loan_amount=float(loan.loan_amount),
                interest_rate=float(loan.interest_rate),
                duration_months=loan.duration_months,
                start_date=loan.start_date,
                **loan_figures(loan, total_paid),
            )
            for loan, total_paid in loans
        ]
    )


@router.get("/{loan_id}", response_model=schemas.LoanDetailResponse)
async def read_loan(
    loan_id: int,
    db: AsyncSession = Depends(get_db),
    current_customer: Customer = Depends(get_current_customer)
):
    """Get loan details with the repayment history."""
    repo = LoanRepository(db)
    loan = await repo.get_owned(loan_id, current_customer.id)
    if loan is None:
        raise HTTPException(status_code=404, detail="Loan not found or access denied")

    total_paid = await repo.get_total_paid(loan.id)
    repayments = await repo.get_repayments(loan.id)
    return schemas.LoanDetailResponse(
        loan=schemas.LoanDetail(
            id=loan.id,
            loan_amount=float(loan.loan_amount),
            interest_rate=float(loan.interest_rate),
            duration_months=loan.duration_months,
            start_date=loan.start_date,
            repayments=[schemas.Repayment.model_validate(r) for r in repayments],
            **loan_figures(loan, total_paid),
        )
    )


@router.post("/{loan_id}/repay", response_model=schemas.RepaymentResponse)
async def repay_loan(
    loan_id: int,
    request: schemas.RepaymentRequest,
    db: AsyncSession = Depends(get_db),
    current_customer: Customer = Depends(get_current_customer)
):
    """
    Make a loan repayment from the customer's primary account.

    Rejected when the amount exceeds the remaining balance or the account
    cannot cover it.
    """
    try:
        result = await LoanRepository(db).repay(loan_id, current_customer.id, request.amount)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InsufficientFundsError:
        raise HTTPException(status_code=400, detail="Insufficient funds")
    except (RepaymentExceedsBalanceError, InvalidArgumentError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return schemas.RepaymentResponse(
        message="Payment successful",
        amount_paid=float(result.amount_paid),
        remaining_balance=result.remaining_balance,
        is_fully_paid=result.is_fully_paid,
        account_debited=result.account_number,
        new_account_balance=float(result.new_account_balance),
    )
