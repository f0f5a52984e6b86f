"""Transaction endpoints for the API."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.repository import AccountRepository
from components.core.exceptions import (
    EntityNotFoundError,
    InsufficientFundsError,
    InvalidArgumentError,
    SameAccountTransferError,
)
from components.core.init_db import get_db
from components.customer.models import Customer
from components.transaction import schemas
from components.transaction.repository import TransactionRepository
from restapi.endpoints.auth import get_current_customer

router = APIRouter(
    prefix="/transactions",
    tags=["transactions"],
    responses={404: {"description": "Not found"}},
)


def _records(rows) -> schemas.TransactionList:
    return schemas.TransactionList(
        transactions=[schemas.TransactionRecord.model_validate(row) for row in rows]
    )


@router.post("/deposit", response_model=schemas.BalanceResponse)
async def deposit(
    request: schemas.DepositRequest,
    db: AsyncSession = Depends(get_db),
    current_customer: Customer = Depends(get_current_customer)
):
    """Deposit money into one of the customer's accounts."""
    repo = AccountRepository(db)
    if await repo.get_owned(request.account_number, current_customer.id) is None:
        raise HTTPException(status_code=404, detail="Account not found or access denied")

    try:
        account = await repo.deposit(request.account_number, request.amount)
    except InvalidArgumentError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Account not found or access denied")

    return schemas.BalanceResponse(message="Deposit successful", new_balance=float(account.balance))


@router.post("/withdraw", response_model=schemas.BalanceResponse)
async def withdraw(
    request: schemas.WithdrawRequest,
    db: AsyncSession = Depends(get_db),
    current_customer: Customer = Depends(get_current_customer)
):
    """Withdraw money from one of the customer's accounts."""
    repo = AccountRepository(db)
    if await repo.get_owned(request.account_number, current_customer.id) is None:
        raise HTTPException(status_code=404, detail="Account not found or access denied")

    try:
        account = await repo.withdraw(request.account_number, request.amount)
    except (InsufficientFundsError, InvalidArgumentError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except EntityNotFoundError:
        raise HTTPException(status_code=404, detail="Account not found or access denied")

    return schemas.BalanceResponse(message="Withdrawal successful", new_balance=float(account.balance))


@router.post("/transfer", response_model=schemas.BalanceResponse)
async def transfer(
    request: schemas.TransferRequest,
    db: AsyncSession = Depends(get_db),
    current_customer: Customer = Depends(get_current_customer)
):
    """
    Transfer money from one of the customer's accounts to any active account.

    Returns the new balance of the source account.
    """
    repo = AccountRepository(db)
    if await repo.get_owned(request.from_account_number, current_customer.id) is None:
        raise HTTPException(status_code=404, detail="Source account not found or access denied")
    if await repo.get_active(request.to_account_number) is None:
        raise HTTPException(status_code=404, detail="Destination account not found")

    try:
        source, _ = await repo.transfer(
            request.from_account_number, request.to_account_number, request.amount
        )
    except (InsufficientFundsError, SameAccountTransferError, InvalidArgumentError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except EntityNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return schemas.BalanceResponse(message="Transfer successful", new_balance=float(source.balance))


@router.get("/history/{account_number}", response_model=schemas.TransactionList)
async def read_history(
    account_number: str,
    db: AsyncSession = Depends(get_db),
    current_customer: Customer = Depends(get_current_customer)
):
    """Get the full transaction history of one of the customer's accounts, newest first."""
    account = await AccountRepository(db).get_owned(account_number, current_customer.id)
    if account is None:
        raise HTTPException(status_code=404, detail="Account not found or access denied")

    rows = await TransactionRepository(db).get_account_history(account.id)
    return _records(rows)


@router.get("/recent", response_model=schemas.TransactionList)
async def read_recent(
    db: AsyncSession = Depends(get_db),
    current_customer: Customer = Depends(get_current_customer)
):
    """Get the 20 most recent transactions across all of the customer's accounts."""
    rows = await TransactionRepository(db).get_recent(current_customer.id, limit=20)
    return _records(rows)
