"""
Status enumerations shared by models and services.
"""

from enum import StrEnum


class UserStatus(StrEnum):
    """Account review status."""

    PENDING = "pending"
    ACTIVE = "active"
    REJECTED = "rejected"


class KycStatus(StrEnum):
    """Bank details / KYC verification status."""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class PayoutStatus(StrEnum):
    """Payout entry status. Completed and failed are terminal."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PayoutStatus.COMPLETED, PayoutStatus.FAILED)


class PurchaseStatus(StrEnum):
    """Purchase history entry status."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class RankRewardStatus(StrEnum):
    """Rank reward approval status."""

    PENDING = "pending"
    APPROVED = "approved"
