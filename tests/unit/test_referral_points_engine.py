"""
Unit tests for the referral points engine.

Tests cover:
- Level weights and the depth cap
- Direct (level 2) points and the reported sum
- Cycles and repeated children in malformed data
- Node ceiling
- Unknown users
"""

from decimal import Decimal

import pytest

from app.services.referral.config import level_weight
from app.services.referral.graph_index import UserGraphIndex
from app.services.referral.points_engine import ReferralPointsEngine


class TestLevelWeights:
    """Test the level weight table."""

    @pytest.mark.parametrize(
        "level,expected",
        [
            (2, "0.12"),
            (3, "0.05"),
            (4, "0.03"),
            (5, "0.02"),
            (6, "0.01"),
            (7, "0.008"),
            (10, "0.008"),
        ],
    )
    def test_weight_per_level(self, level, expected):
        """Each level earns its configured share."""
        assert level_weight(level) == Decimal(expected)

    @pytest.mark.parametrize("level", [0, 1, 11, 12])
    def test_levels_outside_table_earn_nothing(self, level):
        """The root and levels past 10 have no weight."""
        assert level_weight(level) == Decimal("0")


class TestReferralPoints:
    """Test multi-level referral points."""

    def test_no_referrals(self, node):
        """A user without referrals has zero of everything."""
        index = UserGraphIndex.from_nodes([node("A")])
        snapshot = ReferralPointsEngine(index).snapshot("A")

        assert snapshot.referred_points == Decimal("0")
        assert snapshot.direct_referred_points == Decimal("0")
        assert snapshot.referral_point_total == Decimal("0")

    def test_single_direct_child(self, node):
        """One child with 1000 points: direct 120, recursive 120, sum 240."""
        index = UserGraphIndex.from_nodes([
            node("A", ("B",)),
            node("B", (), 1000),
        ])
        snapshot = ReferralPointsEngine(index).snapshot("A")

        assert snapshot.direct_referred_points == Decimal("120")
        assert snapshot.referred_points == Decimal("120")
        assert snapshot.referral_point_total == Decimal("240")

    def test_weights_applied_per_level(self, chain_index):
        """Three levels below the root use 0.12, 0.05 and 0.03."""
        index = chain_index(4, points=1000)
        engine = ReferralPointsEngine(index)

        assert engine.calculate_referral_points("U1") == Decimal("200")

    def test_twelve_level_chain_stops_at_level_ten(self, chain_index):
        """Levels 11 and 12 contribute nothing."""
        long_chain = ReferralPointsEngine(chain_index(12))
        capped_chain = ReferralPointsEngine(chain_index(10))

        expected = Decimal("1000") * Decimal("0.262")
        assert long_chain.calculate_referral_points("U1") == expected
        assert capped_chain.calculate_referral_points("U1") == expected

    def test_max_level_is_configurable(self, chain_index):
        """A lower cap stops the walk earlier."""
        engine = ReferralPointsEngine(chain_index(5), max_level=3)

        assert engine.calculate_referral_points("U1") == Decimal("170")

    def test_siblings_are_all_counted(self, node):
        """Every child on a level is summed."""
        index = UserGraphIndex.from_nodes([
            node("A", ("B", "C")),
            node("B", ("D",), 100),
            node("C", (), 200),
            node("D", (), 1000),
        ])
        engine = ReferralPointsEngine(index)

        # 0.12 * (100 + 200) + 0.05 * 1000
        assert engine.calculate_referral_points("A") == Decimal("86")
        assert engine.calculate_direct_points("A") == Decimal("36")

    def test_missing_child_is_skipped(self, node):
        """Children absent from the index contribute nothing."""
        index = UserGraphIndex.from_nodes([
            node("A", ("GHOST", "B")),
            node("B", (), 500),
        ])
        engine = ReferralPointsEngine(index)

        assert engine.calculate_referral_points("A") == Decimal("60")
        assert engine.calculate_direct_points("A") == Decimal("60")

    def test_unknown_user(self, node):
        """An unknown root yields zeros instead of an error."""
        index = UserGraphIndex.from_nodes([node("A")])
        snapshot = ReferralPointsEngine(index).snapshot("NOPE")

        assert snapshot.referral_point_total == Decimal("0")


class TestMalformedGraphs:
    """Test termination on cycles and repeated links."""

    def test_two_node_cycle_terminates(self, node):
        """A -> B -> A: the repeated A contributes nothing."""
        index = UserGraphIndex.from_nodes([
            node("A", ("B",), 1000),
            node("B", ("A",), 500),
        ])
        engine = ReferralPointsEngine(index)

        assert engine.calculate_referral_points("A") == Decimal("60")
        assert engine.calculate_referral_points("B") == Decimal("120")

    def test_self_referral_terminates(self, node):
        """A user listed as its own child earns nothing from itself."""
        index = UserGraphIndex.from_nodes([node("A", ("A",), 1000)])
        engine = ReferralPointsEngine(index)

        assert engine.calculate_referral_points("A") == Decimal("0")
        assert engine.calculate_direct_points("A") == Decimal("0")

    def test_repeated_child_counted_once(self, node):
        """A child listed twice is counted once at each figure."""
        index = UserGraphIndex.from_nodes([
            node("A", ("B", "B")),
            node("B", (), 1000),
        ])
        snapshot = ReferralPointsEngine(index).snapshot("A")

        assert snapshot.referred_points == Decimal("120")
        assert snapshot.direct_referred_points == Decimal("120")

    def test_diamond_counts_shared_descendant_once(self, node):
        """A descendant reachable by two paths is counted on first reach."""
        index = UserGraphIndex.from_nodes([
            node("A", ("B", "C")),
            node("B", ("D",)),
            node("C", ("D",)),
            node("D", (), 1000),
        ])
        engine = ReferralPointsEngine(index)

        assert engine.calculate_referral_points("A") == Decimal("50")

    def test_queries_do_not_share_visited_state(self, node):
        """Each root query starts with a fresh visited set."""
        index = UserGraphIndex.from_nodes([
            node("A", ("B",)),
            node("B", ("C",), 100),
            node("C", (), 1000),
        ])
        engine = ReferralPointsEngine(index)

        first = engine.calculate_referral_points("A")
        assert engine.calculate_referral_points("B") == Decimal("120")
        assert engine.calculate_referral_points("A") == first

    def test_node_limit_truncates(self, node):
        """The walk stops once the ceiling is reached."""
        index = UserGraphIndex.from_nodes([
            node("A", ("B", "C", "D")),
            node("B", (), 100),
            node("C", (), 100),
            node("D", (), 100),
        ])
        engine = ReferralPointsEngine(index, node_limit=2)

        assert engine.calculate_referral_points("A") == Decimal("24")

    def test_deep_chain_does_not_recurse(self, chain_index):
        """Chains far deeper than the recursion limit are walked safely."""
        engine = ReferralPointsEngine(chain_index(5000), max_level=5000)

        # Levels past the weight table add zero
        assert engine.calculate_referral_points("U1") == Decimal("262")
