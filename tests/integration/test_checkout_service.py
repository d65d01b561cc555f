"""Service tests for payment confirmation."""

from datetime import UTC, datetime, timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, patch

import pytest

from app.models.checkout import Checkout
from app.models.course_details import CourseDetails
from app.services.checkout import (
    CheckoutService,
    PaymentConfirmation,
    compute_signature,
)
from app.utils.datetime_utils import add_months
from app.utils.exceptions import (
    DuplicateEntityError,
    InvalidSignatureError,
    UserNotFoundError,
)


SECRET = "gateway_secret"
NOW = datetime(2026, 5, 10, 12, 0, tzinfo=UTC)


def _payment(amount, user_id="SA10001", signature=None, payment_id="pay_1"):
    return PaymentConfirmation(
        user_id=user_id,
        full_name="Asha Rao",
        package_name="Starter",
        course_name="Trading Basics",
        amount=Decimal(str(amount)),
        order_id="order_1",
        payment_id=payment_id,
        signature=signature or compute_signature(SECRET, "order_1", payment_id),
    )


@pytest.fixture
def checkout_service(mock_session, lock_registry, mock_user_repo):
    service = CheckoutService(
        mock_session, locks=lock_registry, gateway_secret=SECRET
    )
    service.user_repo = mock_user_repo
    service.checkout_repo = AsyncMock()
    service.checkout_repo.get_by_payment_id = AsyncMock(return_value=None)
    service.course_repo = AsyncMock()
    service.course_repo.get_by_user_id = AsyncMock(return_value=None)
    return service


@pytest.fixture(autouse=True)
def frozen_now():
    with patch(
        "app.services.checkout.checkout_service.utc_now", return_value=NOW
    ):
        yield


class TestSignature:
    """Test gateway signature verification."""

    def test_known_vector(self):
        """HMAC-SHA256 over "order|payment", hex encoded."""
        signature = compute_signature("secret", "order_1", "pay_1")

        assert len(signature) == 64
        assert signature == compute_signature("secret", "order_1", "pay_1")
        assert signature != compute_signature("secret", "order_1", "pay_2")
        assert signature != compute_signature("other", "order_1", "pay_1")

    def test_verify_accepts_valid(self, checkout_service):
        checkout_service.verify_signature(
            "order_1", "pay_1", compute_signature(SECRET, "order_1", "pay_1")
        )

    def test_verify_rejects_invalid(self, checkout_service):
        with pytest.raises(InvalidSignatureError):
            checkout_service.verify_signature("order_1", "pay_1", "deadbeef")


class TestConfirmPayment:
    """Test purchase effects."""

    @pytest.mark.asyncio
    async def test_first_purchase_opens_window(self, checkout_service, make_user,
                                               mock_user_repo, mock_session):
        """944 with no course record -> [now, now + 1 month], one history entry."""
        user = make_user("SA10001", self_points=100, total_self_points=300)
        mock_user_repo.get_by_user_id.return_value = user

        result = await checkout_service.confirm_payment(_payment(944))

        assert result.validity_start == NOW
        assert result.validity_end == datetime(2026, 6, 10, 12, 0, tzinfo=UTC)
        assert result.points_added == Decimal("800")

        course = checkout_service.course_repo.save.await_args.args[0]
        assert isinstance(course, CourseDetails)
        assert len(course.purchase_history) == 1
        assert course.purchase_history[0].status == "completed"

        assert user.self_points == Decimal("900")
        assert user.total_self_points == Decimal("1100")

        checkout_service.checkout_repo.create.assert_awaited_once()
        kwargs = checkout_service.checkout_repo.create.await_args.kwargs
        assert kwargs["gateway_payment_id"] == "pay_1"
        assert kwargs["amount"] == Decimal("944")
        mock_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_expired_window_restarts(self, checkout_service, make_user,
                                           mock_user_repo):
        """Expired window + 7080 -> [now, now + 6 months]."""
        mock_user_repo.get_by_user_id.return_value = make_user("SA10001")
        course = CourseDetails(
            user_id="SA10001",
            name="Asha Rao",
            course_name="Old",
            package_name="Old",
            validity_start=NOW - timedelta(days=200),
            validity_end=NOW - timedelta(days=3),
            purchase_history=[],
        )
        checkout_service.course_repo.get_by_user_id.return_value = course

        result = await checkout_service.confirm_payment(_payment(7080))

        assert result.validity_start == NOW
        assert result.validity_end == datetime(2026, 11, 10, 12, 0, tzinfo=UTC)
        assert course.course_name == "Trading Basics"
        assert len(course.purchase_history) == 1

    @pytest.mark.asyncio
    async def test_active_window_extends(self, checkout_service, make_user,
                                         mock_user_repo):
        """Active window + 3540 -> end + 3 months, start unchanged."""
        mock_user_repo.get_by_user_id.return_value = make_user("SA10001")
        start = NOW - timedelta(days=15)
        end = NOW + timedelta(days=15)
        course = CourseDetails(
            user_id="SA10001",
            name="Asha Rao",
            course_name="Old",
            package_name="Old",
            validity_start=start,
            validity_end=end,
            purchase_history=[],
        )
        checkout_service.course_repo.get_by_user_id.return_value = course

        result = await checkout_service.confirm_payment(_payment(3540))

        assert result.validity_start == start
        assert result.validity_end == add_months(end, 3)
        assert result.points_added == Decimal("3000")

    @pytest.mark.asyncio
    async def test_unmapped_amount_records_purchase_without_points(
        self, checkout_service, make_user, mock_user_repo
    ):
        user = make_user("SA10001", self_points=50)
        mock_user_repo.get_by_user_id.return_value = user

        result = await checkout_service.confirm_payment(_payment(500))

        assert result.points_added == Decimal("0")
        assert result.validity_end == result.validity_start
        assert user.self_points == Decimal("50")
        checkout_service.checkout_repo.create.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_bad_signature_writes_nothing(self, checkout_service,
                                                mock_session):
        with pytest.raises(InvalidSignatureError):
            await checkout_service.confirm_payment(
                _payment(944, signature="0" * 64)
            )

        checkout_service.checkout_repo.create.assert_not_awaited()
        mock_session.commit.assert_not_awaited()
        mock_session.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unknown_user(self, checkout_service):
        with pytest.raises(UserNotFoundError):
            await checkout_service.confirm_payment(_payment(944))

        checkout_service.checkout_repo.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_replayed_payment_rejected(self, checkout_service, make_user,
                                             mock_user_repo):
        mock_user_repo.get_by_user_id.return_value = make_user("SA10001")
        checkout_service.checkout_repo.get_by_payment_id.return_value = Checkout(
            user_id="SA10001", gateway_payment_id="pay_1"
        )

        with pytest.raises(DuplicateEntityError):
            await checkout_service.confirm_payment(_payment(944))
