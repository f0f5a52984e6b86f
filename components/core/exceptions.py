"""Domain exception hierarchy for the banking service."""


class BankingError(Exception):
    """Base exception for all banking errors."""


class InvalidArgumentError(BankingError, ValueError):
    """Raised when an input violates a precondition."""


class EntityNotFoundError(BankingError):
    """Raised when a referenced entity does not exist or is not accessible."""


class InsufficientFundsError(BankingError):
    """Raised when an account balance cannot cover a debit."""


class SameAccountTransferError(BankingError):
    """Raised when a transfer names the same account on both sides."""


class RepaymentExceedsBalanceError(BankingError):
    """Raised when a loan repayment is larger than the remaining balance."""

    def __init__(self, remaining: float):
        self.remaining = remaining
        super().__init__(
            f"Payment amount exceeds remaining balance of ₦{remaining:.2f}"
        )


class DuplicateEntityError(BankingError):
    """Raised when an insert collides with a unique key."""
