"""
Database models.

Exports all SQLAlchemy models for easy imports.
"""

from app.models.bank_details import BankDetails
from app.models.base import Base
from app.models.checkout import Checkout
from app.models.course_details import CourseDetails, PurchaseHistoryEntry
from app.models.enums import (
    KycStatus,
    PayoutStatus,
    PurchaseStatus,
    RankRewardStatus,
    UserStatus,
)
from app.models.payout import PayoutEntry, PayoutRecord
from app.models.rank import Rank, RankReward
from app.models.user import User


__all__ = [
    "Base",
    # Users and referral graph
    "User",
    "UserStatus",
    # KYC
    "BankDetails",
    "KycStatus",
    # Payouts
    "PayoutRecord",
    "PayoutEntry",
    "PayoutStatus",
    # Purchases
    "Checkout",
    "CourseDetails",
    "PurchaseHistoryEntry",
    "PurchaseStatus",
    # Ranks
    "Rank",
    "RankReward",
    "RankRewardStatus",
]
