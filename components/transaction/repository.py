"""Repository for transaction history queries."""

from typing import List

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from components.account.models import Account
from components.transaction.models import Transaction


class TransactionRepository:
    """Repository for ledger reads. Writes happen in AccountRepository."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    @staticmethod
    def _base_query():
        from_acc = aliased(Account)
        to_acc = aliased(Account)
        query = (
            select(
                Transaction.id.label("transaction_id"),
                from_acc.account_number.label("from_account"),
                to_acc.account_number.label("to_account"),
                Transaction.transaction_type,
                Transaction.amount,
                Transaction.transaction_date,
            )
            .outerjoin(from_acc, Transaction.from_account_id == from_acc.id)
            .outerjoin(to_acc, Transaction.to_account_id == to_acc.id)
            .order_by(Transaction.transaction_date.desc(), Transaction.id.desc())
        )
        return query, from_acc, to_acc

    async def get_account_history(self, account_id: int) -> List:
        """All transactions touching an account, newest first."""
        query, _, _ = self._base_query()
        query = query.where(
            or_(Transaction.from_account_id == account_id, Transaction.to_account_id == account_id)
        )
        result = await self.session.execute(query)
        return list(result.all())

    async def get_recent(self, customer_id: int, limit: int = 20) -> List:
        """Newest transactions touching any account of the customer."""
        query, from_acc, to_acc = self._base_query()
        query = query.where(
            or_(from_acc.customer_id == customer_id, to_acc.customer_id == customer_id)
        ).limit(limit)
        result = await self.session.execute(query)
        return list(result.all())
