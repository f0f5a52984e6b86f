"""Customer profile endpoints for the API."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.customer import schemas
from components.customer.models import Customer
from components.customer.repository import CustomerRepository
from restapi.endpoints.auth import get_current_customer

router = APIRouter(
    prefix="/customers",
    tags=["customers"],
    responses={404: {"description": "Not found"}},
)


@router.get("/profile", response_model=schemas.ProfileResponse)
async def read_profile(
    current_customer: Customer = Depends(get_current_customer)
):
    """Get the logged-in customer's profile."""
    return schemas.ProfileResponse(customer=schemas.CustomerProfile.model_validate(current_customer))


@router.put("/profile", response_model=schemas.ProfileResponse)
async def update_profile(
    profile: schemas.ProfileUpdate,
    db: AsyncSession = Depends(get_db),
    current_customer: Customer = Depends(get_current_customer)
):
    """Update first name, last name, phone and address."""
    customer = await CustomerRepository(db).update_profile(current_customer.id, profile)
    return schemas.ProfileResponse(
        message="Profile updated successfully",
        customer=schemas.CustomerProfile.model_validate(customer),
    )


@router.get("/dashboard", response_model=schemas.DashboardResponse)
async def read_dashboard(
    db: AsyncSession = Depends(get_db),
    current_customer: Customer = Depends(get_current_customer)
):
    """
    Get dashboard data for the logged-in customer.

    Returns:
    - Active accounts and their total balance
    - The 10 most recent transactions
    - Loans summary: count, amount borrowed, amount repaid, amount outstanding
    """
    data = await CustomerRepository(db).get_dashboard(current_customer.id)
    return schemas.DashboardResponse(dashboard=schemas.Dashboard.model_validate(data))
