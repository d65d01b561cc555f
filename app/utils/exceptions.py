"""
Exception types.

Categorized domain errors raised by services and handled by callers
(request handlers, jobs, scripts).
"""


class MLMError(Exception):
    """Base class for all domain errors."""


# Not found

class NotFoundError(MLMError):
    """Requested entity does not exist."""


class UserNotFoundError(NotFoundError):
    """Raised when a user_id is not present in the user store."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"User not found: {user_id}")


class PayoutRecordNotFoundError(NotFoundError):
    """Raised when a user has no payout ledger yet."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"No payout record found for user {user_id}")


class PayoutEntryNotFoundError(NotFoundError):
    """Raised when a payout entry id is not part of the user's ledger."""

    def __init__(self, user_id: str, entry_id: int) -> None:
        self.user_id = user_id
        self.entry_id = entry_id
        super().__init__(f"Payout entry {entry_id} not found for user {user_id}")


class BankDetailsNotFoundError(NotFoundError):
    """Raised when a user has not submitted bank details."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"Bank details not found for user {user_id}")


class RankNotFoundError(NotFoundError):
    """Raised when a rank document or reward does not exist."""


# Invalid state

class InvalidStateError(MLMError):
    """Operation is not allowed in the entity's current state."""


class KycNotVerifiedError(InvalidStateError):
    """Raised when a payout status change is attempted before KYC passed."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(
            f"User {user_id} KYC is not verified. Cannot update payout status."
        )


class InvalidStatusTransitionError(InvalidStateError):
    """Raised when a status change would leave a terminal status."""

    def __init__(self, current: str, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change status from '{current}' to '{requested}'")


class DuplicateEntityError(InvalidStateError):
    """Raised when a unique document or contact value is already taken."""


# Validation

class InvalidStatusError(MLMError, ValueError):
    """Raised for a status value outside the allowed set."""

    def __init__(self, status: str, allowed: list[str]) -> None:
        self.status = status
        self.allowed = allowed
        super().__init__(
            f"Invalid status value: {status!r} (allowed: {', '.join(allowed)})"
        )


class ReferralCycleError(MLMError, ValueError):
    """Raised when a referral link would make a user its own ancestor."""


class InvalidSignatureError(MLMError):
    """Raised when a payment gateway signature does not match."""


# Concurrency

class ConcurrentUpdateError(MLMError):
    """Raised when a user's points changed underneath a read-modify-write."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"Concurrent update detected for user {user_id}")
