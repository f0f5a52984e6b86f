"""
Fixed-rate loan amortization.

Pure functions over (principal, annual rate in percent, term in months).
Payments keep full precision internally; schedule entries are rounded to
cents for display while the running balance is carried unrounded so that
rounding error does not compound month over month.
"""

import math
from dataclasses import dataclass
from numbers import Real
from typing import Iterator, List

from components.core.exceptions import InvalidArgumentError

# Remaining balances at or below one cent count as fully paid.
FULLY_PAID_TOLERANCE = 0.01


@dataclass(frozen=True)
class ScheduleEntry:
    """One month of an amortization schedule, rounded to cents."""

    month: int
    payment: float
    principal: float
    interest: float
    balance: float


@dataclass(frozen=True)
class LoanTerms:
    """Derived totals for a loan."""

    monthly_payment: float
    total_interest: float
    total_repayment: float


def _check_positive(name: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidArgumentError(f"{name} must be a number")
    value = float(value)
    if not math.isfinite(value) or value <= 0:
        raise InvalidArgumentError(f"{name} must be greater than 0")
    return value


def _check_months(months) -> int:
    if isinstance(months, bool) or not isinstance(months, int):
        raise InvalidArgumentError("Duration must be a whole number of months")
    if months <= 0:
        raise InvalidArgumentError("Duration must be greater than 0")
    return months


def _validate(principal, annual_rate_percent, months):
    return (
        _check_positive("Loan amount", principal),
        _check_positive("Interest rate", annual_rate_percent),
        _check_months(months),
    )


def monthly_rate(annual_rate_percent: float) -> float:
    """Annual percentage rate as a monthly fraction."""
    return (annual_rate_percent / 100) / 12


def _payment(principal: float, rate: float, months: int) -> float:
    # 1 - (1 + r)^-n, computed so it stays accurate as r approaches 0
    discount = -math.expm1(-months * math.log1p(rate))
    if discount == 0:
        return principal / months
    return principal * rate / discount


def compute_monthly_payment(principal: float, annual_rate_percent: float, months: int) -> float:
    """
    Fixed monthly payment that repays `principal` over `months`.

    Raises:
        InvalidArgumentError: if any input is not strictly positive, or
            `months` is not an integer
    """
    principal, annual_rate_percent, months = _validate(principal, annual_rate_percent, months)
    return _payment(principal, monthly_rate(annual_rate_percent), months)


def iter_schedule(principal: float, annual_rate_percent: float, months: int) -> Iterator[ScheduleEntry]:
    """Yield the schedule month by month. See `build_schedule`."""
    principal, annual_rate_percent, months = _validate(principal, annual_rate_percent, months)
    rate = monthly_rate(annual_rate_percent)
    payment = _payment(principal, rate, months)

    balance = principal
    for month in range(1, months + 1):
        interest = balance * rate
        principal_portion = payment - interest
        balance -= principal_portion
        yield ScheduleEntry(
            month=month,
            payment=round(payment, 2),
            principal=round(principal_portion, 2),
            interest=round(interest, 2),
            balance=round(max(balance, 0.0), 2),
        )


def build_schedule(principal: float, annual_rate_percent: float, months: int) -> List[ScheduleEntry]:
    """
    Full amortization schedule with exactly `months` entries.

    Each month's interest is the running balance times the monthly rate and
    the rest of the payment goes to principal.
    """
    return list(iter_schedule(principal, annual_rate_percent, months))


def total_repayment(principal: float, annual_rate_percent: float, months: int) -> float:
    """Contractual amount repaid over the whole term."""
    return compute_monthly_payment(principal, annual_rate_percent, months) * months


def remaining_balance(
    principal: float,
    annual_rate_percent: float,
    months: int,
    total_paid: float,
) -> float:
    """Total contractual repayment minus what has been paid so far."""
    if isinstance(total_paid, bool) or not isinstance(total_paid, Real):
        raise InvalidArgumentError("Total paid must be a number")
    total_paid = float(total_paid)
    if not math.isfinite(total_paid) or total_paid < 0:
        raise InvalidArgumentError("Total paid cannot be negative")
    return total_repayment(principal, annual_rate_percent, months) - total_paid


def is_fully_paid(remaining: float) -> bool:
    return remaining <= FULLY_PAID_TOLERANCE


def summarize_loan(principal: float, annual_rate_percent: float, months: int) -> LoanTerms:
    """Monthly payment, total interest and total repayment, unrounded."""
    principal, annual_rate_percent, months = _validate(principal, annual_rate_percent, months)
    payment = _payment(principal, monthly_rate(annual_rate_percent), months)
    total = payment * months
    return LoanTerms(
        monthly_payment=payment,
        total_interest=total - principal,
        total_repayment=total,
    )
