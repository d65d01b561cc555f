"""
Services.

Business logic layer.
"""

from app.services.base_service import BaseService, transaction
from app.services.checkout import CheckoutService, PaymentConfirmation
from app.services.dashboard_service import DashboardService
from app.services.kyc_service import KycService
from app.services.payout import PayoutSettlementEngine, PayoutStatusService
from app.services.payout_service import PayoutService
from app.services.rank_service import RankService
from app.services.referral_service import ReferralService
from app.services.user import UserService


__all__ = [
    # Base Infrastructure
    "BaseService",
    "transaction",
    # Referral
    "ReferralService",
    # Payouts
    "PayoutService",
    "PayoutSettlementEngine",
    "PayoutStatusService",
    # Purchases
    "CheckoutService",
    "PaymentConfirmation",
    # Users and admin
    "UserService",
    "KycService",
    "RankService",
    "DashboardService",
]
