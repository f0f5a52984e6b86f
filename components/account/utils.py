import secrets
import time
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from components.core.exceptions import InvalidArgumentError

CENT = Decimal("0.01")
# Largest value a Numeric(15,2) column holds
MAX_AMOUNT = Decimal("9999999999999.99")


def generate_account_number() -> str:
    """Function is generate a new account number: ACC + epoch millis + random digits"""
    return f"ACC{int(time.time() * 1000)}{secrets.randbelow(10000):04d}"


def to_money(value) -> Decimal:
    """Convert a float/str/Decimal amount to a Decimal rounded to cents."""
    try:
        money = Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise InvalidArgumentError(f"Invalid amount: {value}")
    if not money.is_finite():
        raise InvalidArgumentError(f"Invalid amount: {value}")
    return money


def check_balance_limit(balance: Decimal) -> Decimal:
    """Reject a balance that would not fit the balance column."""
    if balance > MAX_AMOUNT:
        raise InvalidArgumentError(f"Balance cannot exceed {MAX_AMOUNT}")
    return balance
