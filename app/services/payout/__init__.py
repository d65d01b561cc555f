"""
Payout services package.

- settlement: global payout run
- status_service: KYC-gated payout status transitions
"""

from app.services.payout.settlement import (
    PayoutRunResult,
    PayoutSettlementEngine,
    SettledPayout,
    apply_deduction,
)
from app.services.payout.status_service import (
    PayoutStatusService,
    parse_payout_status,
)


__all__ = [
    "PayoutRunResult",
    "PayoutSettlementEngine",
    "PayoutStatusService",
    "SettledPayout",
    "apply_deduction",
    "parse_payout_status",
]
