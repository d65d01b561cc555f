"""
Standard type definitions for database models.

Provides consistent types for point and currency fields across all models.
"""

from sqlalchemy import DECIMAL

# Standard points type for self points, referral points, payout ledgers
# Precision: 18 digits total, 8 after decimal point
# Weighted referral shares (0.008 of a point) keep full precision
PointsType = DECIMAL(18, 8)

# Currency amount of a purchase (rupees, two decimals)
AmountType = DECIMAL(12, 2)
