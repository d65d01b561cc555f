"""
Shared fixtures for unit tests.

This module provides referral graph builders used across the engine tests:
- node factory
- linear referral chains
"""

from decimal import Decimal

import pytest

from app.services.referral.graph_index import UserGraphIndex, UserNode


@pytest.fixture
def node():
    """
    Factory for UserNode.

    Returns:
        Callable building a node from an id, children and points
    """
    def _node(
        user_id: str,
        referred: tuple[str, ...] = (),
        self_points: str | int = 0,
        total_self_points: str | int | None = None,
    ) -> UserNode:
        points = Decimal(str(self_points))
        return UserNode(
            user_id=user_id,
            referred_ids=tuple(referred),
            self_points=points,
            total_self_points=(
                points if total_self_points is None
                else Decimal(str(total_self_points))
            ),
            name=f"User {user_id}",
        )

    return _node


@pytest.fixture
def chain_index(node):
    """
    Factory for a linear chain U1 -> U2 -> ... -> Un.

    U1 is the root; every other member carries the given self points.
    """
    def _chain(length: int, points: int = 1000) -> UserGraphIndex:
        nodes = []
        for i in range(1, length + 1):
            child = (f"U{i + 1}",) if i < length else ()
            nodes.append(node(f"U{i}", child, 0 if i == 1 else points))
        return UserGraphIndex.from_nodes(nodes)

    return _chain
