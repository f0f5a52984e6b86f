"""Repository for account operations and balance mutations."""

import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.models import Account
from components.account.utils import (
    MAX_AMOUNT,
    check_balance_limit,
    generate_account_number,
    to_money,
)
from components.core.exceptions import (
    EntityNotFoundError,
    InsufficientFundsError,
    InvalidArgumentError,
    SameAccountTransferError,
)
from components.transaction.models import Transaction, TransactionType

logger = logging.getLogger(__name__)


class AccountRepository:
    """
    Repository for account operations.

    Balance-changing methods lock the affected rows, validate, mutate and
    record a ledger entry inside the session's current transaction. With
    `commit=True` (the default) they commit the unit themselves and roll it
    back on any error; callers composing a larger unit pass `commit=False`
    and commit once at the end.
    """

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_active_accounts(self, customer_id: int) -> List[Account]:
        """Get all active accounts of a customer, oldest first."""
        result = await self.session.execute(
            select(Account)
            .where(Account.customer_id == customer_id, Account.is_active.is_(True))
            .order_by(Account.date_opened, Account.id)
        )
        return list(result.scalars().all())

    async def get_owned(self, account_number: str, customer_id: int) -> Optional[Account]:
        """Get an active account only if it belongs to the customer."""
        result = await self.session.execute(
            select(Account).where(
                Account.account_number == account_number,
                Account.customer_id == customer_id,
                Account.is_active.is_(True),
            )
        )
        return result.scalar_one_or_none()

    async def get_active(self, account_number: str) -> Optional[Account]:
        """Get any active account by number."""
        result = await self.session.execute(
            select(Account).where(
                Account.account_number == account_number,
                Account.is_active.is_(True),
            )
        )
        return result.scalar_one_or_none()

    async def get_primary(self, customer_id: int) -> Optional[Account]:
        """The customer's oldest active account."""
        result = await self.session.execute(
            select(Account)
            .where(Account.customer_id == customer_id, Account.is_active.is_(True))
            .order_by(Account.date_opened, Account.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def open_account(
        self,
        customer_id: int,
        account_type: str,
        initial_deposit=0,
        commit: bool = True,
    ) -> Account:
        """Open a new account, recording a non-zero opening deposit in the ledger."""
        opening = to_money(initial_deposit)
        if opening < 0:
            raise InvalidArgumentError("Initial deposit cannot be negative")
        check_balance_limit(opening)

        account = Account(
            customer_id=customer_id,
            account_number=generate_account_number(),
            account_type=account_type,
            balance=opening,
        )
        self.session.add(account)
        await self.session.flush()

        if opening > 0:
            self.session.add(Transaction(
                to_account_id=account.id,
                transaction_type=TransactionType.DEPOSIT.value,
                amount=opening,
            ))

        if commit:
            await self.session.commit()
        logger.info("Opened %s account %s for customer %s", account_type, account.account_number, customer_id)
        return account

    async def _lock(self, account_number: str) -> Account:
        result = await self.session.execute(
            select(Account)
            .where(Account.account_number == account_number, Account.is_active.is_(True))
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        account = result.scalar_one_or_none()
        if account is None:
            raise EntityNotFoundError(f"Account {account_number} not found")
        return account

    async def _finish(self, commit: bool) -> None:
        if commit:
            await self.session.commit()

    async def deposit(self, account_number: str, amount, commit: bool = True) -> Account:
        """Credit an account and record a Deposit."""
        value = self._positive(amount)
        try:
            account = await self._lock(account_number)
            account.balance = check_balance_limit(Decimal(account.balance) + value)
            self.session.add(Transaction(
                to_account_id=account.id,
                transaction_type=TransactionType.DEPOSIT.value,
                amount=value,
            ))
            await self._finish(commit)
        except Exception:
            if commit:
                await self.session.rollback()
            raise
        return account

    async def withdraw(self, account_number: str, amount, commit: bool = True) -> Account:
        """Debit an account and record a Withdrawal; fails on insufficient funds."""
        value = self._positive(amount)
        try:
            account = await self._lock(account_number)
            if Decimal(account.balance) < value:
                raise InsufficientFundsError("Insufficient funds")
            account.balance = Decimal(account.balance) - value
            self.session.add(Transaction(
                from_account_id=account.id,
                transaction_type=TransactionType.WITHDRAWAL.value,
                amount=value,
            ))
            await self._finish(commit)
        except Exception:
            if commit:
                await self.session.rollback()
            raise
        return account

    async def transfer(self, from_number: str, to_number: str, amount, commit: bool = True) -> Tuple[Account, Account]:
        """Move money between two accounts and record a Transfer."""
        if from_number == to_number:
            raise SameAccountTransferError("Cannot transfer to the same account")
        value = self._positive(amount)
        try:
            # Rows are always locked in account-number order
            locked = {}
            for number in sorted((from_number, to_number)):
                locked[number] = await self._lock(number)
            source, destination = locked[from_number], locked[to_number]

            if Decimal(source.balance) < value:
                raise InsufficientFundsError("Insufficient funds")
            source.balance = Decimal(source.balance) - value
            destination.balance = check_balance_limit(Decimal(destination.balance) + value)
            self.session.add(Transaction(
                from_account_id=source.id,
                to_account_id=destination.id,
                transaction_type=TransactionType.TRANSFER.value,
                amount=value,
            ))
            await self._finish(commit)
        except Exception:
            if commit:
                await self.session.rollback()
            raise
        return source, destination

    async def get_balance(self, account_number: str) -> Decimal:
        result = await self.session.execute(
            select(Account.balance).where(Account.account_number == account_number)
        )
        balance = result.scalar_one_or_none()
        if balance is None:
            raise EntityNotFoundError(f"Account {account_number} not found")
        return Decimal(balance)

    @staticmethod
    def _positive(amount) -> Decimal:
        value = to_money(amount)
        if value <= 0:
            raise InvalidArgumentError("Amount must be greater than 0")
        if value > MAX_AMOUNT:
            raise InvalidArgumentError(f"Amount cannot exceed {MAX_AMOUNT}")
        return value
