"""
Global payout settlement.

Converts every user's current referral points into a pending payout entry,
applies the deduction, and resets the user's settlement-period accrual.
"""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.config.settings import settings
from app.models.enums import PayoutStatus
from app.models.payout import PayoutEntry, PayoutRecord
from app.models.user import User
from app.repositories.payout_repository import PayoutRepository
from app.repositories.user_repository import UserRepository
from app.services.referral import ReferralPointsEngine, UserGraphIndex
from app.utils.datetime_utils import utc_now
from app.utils.exceptions import (
    ConcurrentUpdateError,
    MLMError,
    UserNotFoundError,
)
from app.utils.user_locks import UserLockRegistry, user_point_locks

# Serializes runs started on one event loop. Runs from other loops or
# processes are serialized by the Redis lock in the background job.
_run_lock = asyncio.Lock()


@dataclass(frozen=True)
class SettledPayout:
    """One user's outcome in a payout run."""

    user_id: str
    name: str
    amount: Decimal
    payout_amount: Decimal
    status: str
    date: datetime

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.name,
            "amount": str(self.amount),
            "payout_amount": str(self.payout_amount),
            "status": self.status,
            "date": self.date.isoformat(),
        }


@dataclass
class PayoutRunResult:
    """Outcome of a global payout run."""

    settled: list[SettledPayout] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def total_users(self) -> int:
        return len(self.settled)

    @property
    def total_amount(self) -> Decimal:
        return sum((p.amount for p in self.settled), Decimal("0"))

    def to_dict(self) -> dict:
        return {
            "total_users": self.total_users,
            "total_amount": str(self.total_amount),
            "payouts": [p.to_dict() for p in self.settled],
            "skipped": list(self.skipped),
        }


def apply_deduction(amount: Decimal, rate: Decimal) -> Decimal:
    """Amount actually paid after the platform deduction."""
    return amount - amount * rate


class PayoutSettlementEngine:
    """
    Runs the global payout.

    The referral index is built once at the start of the run, so every
    user's entitlement reflects the accrual as it stood when the run began
    (not the progressively zeroed points of users already settled).
    Each user is settled in its own transaction under the per-user lock, and
    only the points captured in the snapshot are cleared: points a purchase
    adds while the run is in progress stay on the user for the next run.
    """

    def __init__(
        self,
        session: AsyncSession,
        locks: UserLockRegistry = user_point_locks,
        deduction_rate: Decimal | None = None,
    ) -> None:
        self.session = session
        self.locks = locks
        self.deduction_rate = (
            settings.payout_deduction_rate
            if deduction_rate is None
            else deduction_rate
        )
        self.user_repo = UserRepository(session)
        self.payout_repo = PayoutRepository(session)

    async def run_global_payout(self) -> PayoutRunResult:
        """
        Settle every user.

        Per-user failures are rolled back, logged and reported in
        PayoutRunResult.skipped; the run continues with the next user.
        Failing to load the population aborts the run.

        Returns:
            PayoutRunResult
        """
        async with _run_lock:
            index = await UserGraphIndex.build(self.user_repo)
            engine = ReferralPointsEngine(index)
            result = PayoutRunResult()

            logger.info(
                "Global payout run started",
                extra={
                    "users": len(index),
                    "deduction_rate": str(self.deduction_rate),
                },
            )

            for node in index:
                entitlement = engine.calculate_referral_points(node.user_id)
                try:
                    settled = await self.settle_user(
                        node.user_id, entitlement, settled_points=node.self_points
                    )
                except (MLMError, SQLAlchemyError) as e:
                    await self.session.rollback()
                    logger.error(
                        "Payout settlement failed, user skipped",
                        extra={"user_id": node.user_id, "error": str(e)},
                    )
                    result.skipped.append(node.user_id)
                    continue
                result.settled.append(settled)

            logger.info(
                "Global payout run finished",
                extra={
                    "settled": result.total_users,
                    "skipped": len(result.skipped),
                    "total_amount": str(result.total_amount),
                },
            )
            return result

    async def settle_user(
        self,
        user_id: str,
        entitlement: Decimal,
        settled_points: Decimal | None = None,
    ) -> SettledPayout:
        """
        Settle one user and commit.

        Args:
            user_id: Public user id
            entitlement: Referral points to convert into a payout
            settled_points: Self points the entitlement was computed from;
                only these are cleared. None clears the whole accrual.

        Returns:
            SettledPayout

        Raises:
            UserNotFoundError: If the user disappeared since the run began
            ConcurrentUpdateError: If another writer changed the user
        """
        async with self.locks.hold(user_id):
            user = await self.user_repo.get_by_user_id(user_id)
            if user is None:
                raise UserNotFoundError(user_id)

            now = utc_now()
            entry = PayoutEntry(
                amount=entitlement,
                payout_amount=apply_deduction(entitlement, self.deduction_rate),
                status=PayoutStatus.PENDING,
                created_at=now,
            )
            await self._append_entry(user, entry)

            if settled_points is None:
                user.self_points = Decimal("0")
            else:
                remaining = max(user.self_points - settled_points, Decimal("0"))
                if remaining:
                    logger.info(
                        "Points accrued during payout run carried over",
                        extra={"user_id": user_id, "points": str(remaining)},
                    )
                user.self_points = remaining

            try:
                await self.user_repo.save(user)
                await self.session.commit()
            except StaleDataError as e:
                raise ConcurrentUpdateError(user_id) from e

        logger.debug(
            "User settled",
            extra={
                "user_id": user_id,
                "amount": str(entry.amount),
                "payout_amount": str(entry.payout_amount),
            },
        )
        return SettledPayout(
            user_id=user_id,
            name=user.name,
            amount=entry.amount,
            payout_amount=entry.payout_amount,
            status=entry.status,
            date=now,
        )

    async def _append_entry(self, user: User, entry: PayoutEntry) -> None:
        record = await self.payout_repo.get_by_user_id(
            user.user_id, for_update=True
        )
        if record is None:
            record = PayoutRecord(
                user_id=user.user_id,
                name=user.name,
                total_points=entry.amount,
                referred_points=Decimal("0"),
                direct_referred_points=Decimal("0"),
                payouts=[entry],
            )
        else:
            record.total_points += entry.amount
            record.referred_points = Decimal("0")
            record.direct_referred_points = Decimal("0")
            record.payouts.append(entry)
        await self.payout_repo.save(record)
