"""Account endpoints for the API."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from components.account import schemas
from components.account.repository import AccountRepository
from components.core.init_db import get_db
from components.customer.models import Customer
from restapi.endpoints.auth import get_current_customer

router = APIRouter(
    prefix="/accounts",
    tags=["accounts"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=schemas.AccountList)
async def read_accounts(
    db: AsyncSession = Depends(get_db),
    current_customer: Customer = Depends(get_current_customer)
):
    """Get all active accounts of the logged-in customer."""
    accounts = await AccountRepository(db).get_active_accounts(current_customer.id)
    return schemas.AccountList(
        accounts=[schemas.Account.model_validate(account) for account in accounts]
    )


@router.get("/{account_number}/balance", response_model=schemas.AccountBalance)
async def read_balance(
    account_number: str,
    db: AsyncSession = Depends(get_db),
    current_customer: Customer = Depends(get_current_customer)
):
    """Get the balance of one of the customer's accounts."""
    account = await AccountRepository(db).get_owned(account_number, current_customer.id)
    if account is None:
        raise HTTPException(status_code=404, detail="Account not found")
    return schemas.AccountBalance(balance=float(account.balance), account_type=account.account_type)


@router.post("", response_model=schemas.AccountCreated, status_code=status.HTTP_201_CREATED)
async def open_account(
    account_in: schemas.AccountCreate,
    db: AsyncSession = Depends(get_db),
    current_customer: Customer = Depends(get_current_customer)
):
    """
    Open a new account.

    - accountType: Savings or Current
    - initialDeposit: optional opening balance (defaults to 0)
    """
    account = await AccountRepository(db).open_account(
        current_customer.id, account_in.account_type, account_in.initial_deposit
    )
    return schemas.AccountCreated(
        message="Account created successfully",
        account_number=account.account_number,
        account_type=account.account_type,
        balance=float(account.balance),
    )
