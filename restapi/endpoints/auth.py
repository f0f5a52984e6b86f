"""Authentication endpoints for customer signup and login."""

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.exceptions import DuplicateEntityError
from components.core.init_db import get_db
from components.core.security import (
    verify_password,
    create_access_token,
    verify_token,
)
from components.customer.models import Customer
from components.customer.repository import CustomerRepository
from components.customer.schemas import (
    AuthResponse,
    CustomerSummary,
    LoginRequest,
    SignupRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def _issue_token(customer: Customer) -> str:
    return create_access_token(data={"sub": str(customer.id), "email": customer.email})


async def get_current_customer(
    db: AsyncSession = Depends(get_db),
    token: str = Depends(oauth2_scheme)
) -> Customer:
    """Get current customer from JWT token."""
    payload = verify_token(token)
    if payload is None or not str(payload.get("sub", "")).isdigit():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    customer = await CustomerRepository(db).get_by_id(int(payload["sub"]))
    if customer is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Customer not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not customer.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )
    return customer


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    signup_in: SignupRequest,
    db: AsyncSession = Depends(get_db)
) -> AuthResponse:
    """Register a new customer with a default savings account and return a JWT token."""
    repo = CustomerRepository(db)
    if await repo.exists(signup_in.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists with this email",
        )

    try:
        customer, _ = await repo.create(signup_in)
    except DuplicateEntityError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists with this email",
        )

    return AuthResponse(
        message="Account created successfully",
        token=_issue_token(customer),
        customer=CustomerSummary.model_validate(customer),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db)
) -> AuthResponse:
    """Login customer and return JWT token."""
    customer = await CustomerRepository(db).get_by_email(credentials.email)

    if customer is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid credentials",
        )
    if not verify_password(credentials.password, customer.password_hash):
        logger.warning("Failed login for customer %s", customer.id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid credentials",
        )
    if not customer.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive",
        )

    return AuthResponse(
        message="Login successful",
        token=_issue_token(customer),
        customer=CustomerSummary.model_validate(customer),
    )
