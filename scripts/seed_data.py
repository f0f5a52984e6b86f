"""Script to seed demo customers, accounts, transactions and loans into the database."""

import asyncio
import logging

from components.account.repository import AccountRepository
from components.core.config import get_settings
from components.core.database import DatabaseManager
from components.core.logging import setup_logging
from components.customer.repository import CustomerRepository
from components.customer.schemas import SignupRequest
from components.loan.repository import LoanRepository

logger = logging.getLogger(__name__)

DEMO_CUSTOMERS = [
    {"first_name": "John", "last_name": "Doe", "email": "john.doe@example.com"},
    {"first_name": "Jane", "last_name": "Smith", "email": "jane.smith@example.com"},
    {"first_name": "Bob", "last_name": "Wilson", "email": "bob.wilson@example.com"},
]
DEMO_PASSWORD = "password123"


async def seed_data(db_manager: DatabaseManager) -> None:
    """Seed demo data; customers that already exist are skipped."""
    async with db_manager.get_db() as db:
        customers = CustomerRepository(db)
        accounts = AccountRepository(db)
        loans = LoanRepository(db)

        for index, fields in enumerate(DEMO_CUSTOMERS):
            if await customers.exists(fields["email"]):
                logger.info("Skipping existing customer %s", fields["email"])
                continue

            customer, savings = await customers.create(
                SignupRequest(password=DEMO_PASSWORD, **fields)
            )
            current = await accounts.open_account(customer.id, "Current", 5000 * (index + 1))
            await accounts.deposit(savings.account_number, 2500)
            await accounts.transfer(current.account_number, savings.account_number, 750)

            loan, _ = await loans.apply(customer.id, 10000 * (index + 1), 12.5, 12)
            await loans.repay(loan.id, customer.id, 500)
            logger.info("Seeded customer %s with loan %s", customer.email, loan.id)


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    db_manager = DatabaseManager(settings=settings)
    try:
        await db_manager.connect(create_tables=True)
        await seed_data(db_manager)
    finally:
        await db_manager.dispose()


if __name__ == "__main__":
    asyncio.run(main())
