"""
Unit tests for the domain exception hierarchy.
"""

import pytest

from app.models.enums import PayoutStatus
from app.services.payout.status_service import parse_payout_status
from app.utils.exceptions import (
    ConcurrentUpdateError,
    InvalidStateError,
    InvalidStatusError,
    InvalidStatusTransitionError,
    KycNotVerifiedError,
    MLMError,
    NotFoundError,
    PayoutEntryNotFoundError,
    ReferralCycleError,
    UserNotFoundError,
)


class TestHierarchy:
    """Test exception families."""

    def test_not_found_family(self):
        assert issubclass(UserNotFoundError, NotFoundError)
        assert issubclass(PayoutEntryNotFoundError, NotFoundError)
        assert issubclass(NotFoundError, MLMError)

    def test_invalid_state_family(self):
        assert issubclass(KycNotVerifiedError, InvalidStateError)
        assert issubclass(InvalidStatusTransitionError, InvalidStateError)

    def test_value_errors(self):
        assert issubclass(InvalidStatusError, ValueError)
        assert issubclass(ReferralCycleError, ValueError)

    def test_messages_carry_context(self):
        assert "SA12345" in str(UserNotFoundError("SA12345"))
        assert "7" in str(PayoutEntryNotFoundError("SA12345", 7))
        assert ConcurrentUpdateError("SA1").user_id == "SA1"

        error = InvalidStatusTransitionError("completed", "failed")
        assert error.current == "completed"
        assert "failed" in str(error)


class TestParsePayoutStatus:
    """Test payout status parsing."""

    @pytest.mark.parametrize("raw", ["completed", "COMPLETED", " Completed "])
    def test_case_insensitive(self, raw):
        assert parse_payout_status(raw) is PayoutStatus.COMPLETED

    def test_unknown_status(self):
        with pytest.raises(InvalidStatusError) as exc_info:
            parse_payout_status("paid")

        assert exc_info.value.allowed == ["pending", "completed", "failed"]

    def test_terminal_statuses(self):
        assert PayoutStatus.COMPLETED.is_terminal
        assert PayoutStatus.FAILED.is_terminal
        assert not PayoutStatus.PENDING.is_terminal
