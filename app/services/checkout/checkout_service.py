"""
Checkout service.

Confirms gateway payments and applies their effects: the purchase record,
the point grant and the course validity window.
"""

import hashlib
import hmac
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.config.settings import settings
from app.models.checkout import Checkout
from app.models.course_details import CourseDetails, PurchaseHistoryEntry
from app.models.enums import PurchaseStatus
from app.repositories.checkout_repository import CheckoutRepository
from app.repositories.course_details_repository import CourseDetailsRepository
from app.repositories.user_repository import UserRepository
from app.services.checkout.validity import (
    compute_validity_window,
    points_for_amount,
    validity_months_for_amount,
)
from app.utils.datetime_utils import utc_now
from app.utils.db_decorators import with_rollback_on_error
from app.utils.exceptions import (
    ConcurrentUpdateError,
    DuplicateEntityError,
    InvalidSignatureError,
    UserNotFoundError,
)
from app.utils.user_locks import UserLockRegistry, user_point_locks


@dataclass(frozen=True)
class PaymentConfirmation:
    """Payment callback data from the gateway plus the purchase details."""

    user_id: str
    full_name: str
    package_name: str
    course_name: str
    amount: Decimal
    order_id: str
    payment_id: str
    signature: str


@dataclass(frozen=True)
class CheckoutResult:
    """Effects of a confirmed payment."""

    user_id: str
    course_name: str
    package_name: str
    validity_start: datetime
    validity_end: datetime
    points_added: Decimal


def compute_signature(secret: str, order_id: str, payment_id: str) -> str:
    """HMAC-SHA256 of "order_id|payment_id", hex encoded."""
    message = f"{order_id}|{payment_id}".encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


class CheckoutService:
    """Applies confirmed purchases."""

    def __init__(
        self,
        session: AsyncSession,
        locks: UserLockRegistry = user_point_locks,
        gateway_secret: str | None = None,
    ) -> None:
        """
        Initialize checkout service.

        Args:
            session: Database session
            locks: Per-user lock registry shared with payout settlement
            gateway_secret: Signing secret (defaults to settings)
        """
        self.session = session
        self.locks = locks
        self.gateway_secret = (
            settings.payment_gateway_secret
            if gateway_secret is None
            else gateway_secret
        )
        self.user_repo = UserRepository(session)
        self.checkout_repo = CheckoutRepository(session)
        self.course_repo = CourseDetailsRepository(session)

    def verify_signature(
        self, order_id: str, payment_id: str, signature: str
    ) -> None:
        """
        Check the gateway signature.

        Raises:
            InvalidSignatureError: If the signature does not match
        """
        expected = compute_signature(self.gateway_secret, order_id, payment_id)
        if not hmac.compare_digest(expected, signature or ""):
            logger.warning(
                "Payment signature mismatch",
                extra={"order_id": order_id, "payment_id": payment_id},
            )
            raise InvalidSignatureError(
                f"Invalid signature for payment {payment_id}"
            )

    @with_rollback_on_error
    async def confirm_payment(
        self, payment: PaymentConfirmation
    ) -> CheckoutResult:
        """
        Verify a payment and apply it.

        Records the purchase, adds the tier's points to the user's self and
        lifetime points, and extends (or restarts) the validity window.
        Everything is committed together.

        Args:
            payment: Gateway confirmation

        Returns:
            CheckoutResult

        Raises:
            InvalidSignatureError: Signature mismatch (nothing written)
            DuplicateEntityError: Payment already applied
            UserNotFoundError: Unknown user
            ConcurrentUpdateError: User changed by another writer
        """
        self.verify_signature(
            payment.order_id, payment.payment_id, payment.signature
        )

        async with self.locks.hold(payment.user_id):
            if await self.checkout_repo.get_by_payment_id(payment.payment_id):
                raise DuplicateEntityError(
                    f"Payment {payment.payment_id} already applied"
                )

            user = await self.user_repo.get_by_user_id(payment.user_id)
            if user is None:
                raise UserNotFoundError(payment.user_id)

            now = utc_now()
            await self.checkout_repo.create(
                user_id=payment.user_id,
                full_name=payment.full_name,
                package_name=payment.package_name,
                course_name=payment.course_name,
                amount=payment.amount,
                gateway_order_id=payment.order_id,
                gateway_payment_id=payment.payment_id,
                gateway_signature=payment.signature,
                created_at=now,
            )

            points = points_for_amount(payment.amount)
            months = validity_months_for_amount(payment.amount)

            user.self_points += points
            user.total_self_points += points

            course = await self._apply_validity(payment, months, now)

            try:
                await self.user_repo.save(user)
                await self.session.commit()
            except StaleDataError as e:
                raise ConcurrentUpdateError(payment.user_id) from e

        logger.info(
            "Payment confirmed",
            extra={
                "user_id": payment.user_id,
                "payment_id": payment.payment_id,
                "amount": str(payment.amount),
                "points_added": str(points),
                "months": months,
            },
        )
        return CheckoutResult(
            user_id=payment.user_id,
            course_name=payment.course_name,
            package_name=payment.package_name,
            validity_start=course.validity_start,
            validity_end=course.validity_end,
            points_added=points,
        )

    async def _apply_validity(
        self, payment: PaymentConfirmation, months: int, now: datetime
    ) -> CourseDetails:
        entry = PurchaseHistoryEntry(
            course_name=payment.course_name,
            package_name=payment.package_name,
            amount=payment.amount,
            status=PurchaseStatus.COMPLETED,
            created_at=now,
        )

        course = await self.course_repo.get_by_user_id(payment.user_id)
        if course is None:
            start, end = compute_validity_window(None, None, months, now)
            course = CourseDetails(
                user_id=payment.user_id,
                name=payment.full_name,
                course_name=payment.course_name,
                package_name=payment.package_name,
                validity_start=start,
                validity_end=end,
                purchase_history=[entry],
            )
        else:
            start, end = compute_validity_window(
                course.validity_start, course.validity_end, months, now
            )
            course.course_name = payment.course_name
            course.package_name = payment.package_name
            course.validity_start = start
            course.validity_end = end
            course.purchase_history.append(entry)

        await self.course_repo.save(course)
        return course

    async def get_user_checkouts(self, user_id: str) -> list[Checkout]:
        """Get a user's confirmed purchases, oldest first."""
        return await self.checkout_repo.find_by_user_id(user_id)
