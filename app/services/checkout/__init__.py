"""
Checkout services package.

- validity: reward tiers and validity window rules
- checkout_service: payment confirmation
"""

from app.services.checkout.checkout_service import (
    CheckoutResult,
    CheckoutService,
    PaymentConfirmation,
    compute_signature,
)
from app.services.checkout.validity import (
    compute_validity_window,
    points_for_amount,
    round_amount,
    validity_months_for_amount,
)


__all__ = [
    "CheckoutResult",
    "CheckoutService",
    "PaymentConfirmation",
    "compute_signature",
    "compute_validity_window",
    "points_for_amount",
    "round_amount",
    "validity_months_for_amount",
]
