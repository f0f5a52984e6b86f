"""Repository for customer operations."""

import logging
from typing import Dict, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.models import Account
from components.account.repository import AccountRepository
from components.core.exceptions import DuplicateEntityError, EntityNotFoundError
from components.core.security import get_password_hash
from components.customer.models import Customer
from components.customer.schemas import ProfileUpdate, SignupRequest
from components.loan import repository as loan_repository
from components.transaction.repository import TransactionRepository

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNT_TYPE = "Savings"


class CustomerRepository:
    """Repository for customer operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, signup: SignupRequest) -> Tuple[Customer, Account]:
        """
        Create a customer together with a default savings account.

        Raises:
            DuplicateEntityError: the email is already registered
        """
        try:
            customer = Customer(
                first_name=signup.first_name,
                last_name=signup.last_name,
                email=signup.email,
                password_hash=get_password_hash(signup.password),
                phone=signup.phone or None,
                address=signup.address or None,
                user_role="Customer",
            )
            self.session.add(customer)
            await self.session.flush()
            account = await AccountRepository(self.session).open_account(
                customer.id, DEFAULT_ACCOUNT_TYPE, 0, commit=False
            )
            await self.session.commit()
        except IntegrityError:
            await self.session.rollback()
            raise DuplicateEntityError(f"Customer {signup.email} already exists")
        except Exception:
            await self.session.rollback()
            raise
        logger.info("Registered customer %s", customer.id)
        return customer, account

    async def get_by_id(self, customer_id: int) -> Optional[Customer]:
        """Get customer by ID."""
        result = await self.session.execute(
            select(Customer).where(Customer.id == customer_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[Customer]:
        """Get customer by email."""
        result = await self.session.execute(
            select(Customer).where(Customer.email == email)
        )
        return result.scalar_one_or_none()

    async def exists(self, email: str) -> bool:
        """Check if customer with given email exists."""
        result = await self.session.execute(
            select(Customer.id).where(Customer.email == email)
        )
        return result.scalar_one_or_none() is not None

    async def update_profile(self, customer_id: int, profile: ProfileUpdate) -> Customer:
        """Update the editable profile fields."""
        customer = await self.get_by_id(customer_id)
        if customer is None:
            raise EntityNotFoundError("Customer not found")

        customer.first_name = profile.first_name
        customer.last_name = profile.last_name
        customer.phone = profile.phone or None
        customer.address = profile.address or None

        await self.session.commit()
        await self.session.refresh(customer)
        return customer

    async def get_dashboard(self, customer_id: int) -> Dict:
        """
        Collect the dashboard view for a customer.

        Returns a dict with:
        - accounts: active accounts
        - total_balance: sum of their balances
        - recent_transactions: the 10 newest ledger rows
        - loans_summary: loan count, amount borrowed, amount repaid and
          the amortized amount still outstanding
        """
        accounts = await AccountRepository(self.session).get_active_accounts(customer_id)
        total_balance = sum(float(account.balance) for account in accounts)

        transactions = await TransactionRepository(self.session).get_recent(customer_id, limit=10)

        loans = await loan_repository.LoanRepository(self.session).get_loans_with_totals(customer_id)
        total_borrowed = sum(float(loan.loan_amount) for loan, _ in loans)
        total_repaid = sum(float(paid) for _, paid in loans)
        total_outstanding = sum(
            loan_repository.loan_figures(loan, paid)["remaining_balance"] for loan, paid in loans
        )

        return {
            "accounts": accounts,
            "total_balance": round(total_balance, 2),
            "recent_transactions": transactions,
            "loans_summary": {
                "total_loans": len(loans),
                "total_borrowed": round(total_borrowed, 2),
                "total_repaid": round(total_repaid, 2),
                "total_outstanding": round(total_outstanding, 2),
            },
        }
