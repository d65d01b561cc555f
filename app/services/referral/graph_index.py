"""
Referral graph index.

In-memory snapshot of the user population used by one computation pass.
Built fresh for every request or payout run; never cached across them,
since points change between calls.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from app.models.user import User
    from app.repositories.user_repository import UserRepository


@dataclass(frozen=True)
class UserNode:
    """Immutable view of a user inside the index."""

    user_id: str
    referred_ids: tuple[str, ...] = ()
    self_points: Decimal = Decimal("0")
    total_self_points: Decimal = Decimal("0")
    name: str = ""


@dataclass
class UserGraphIndex:
    """Mapping user_id -> UserNode with O(1) lookups."""

    nodes: dict[str, UserNode] = field(default_factory=dict)

    @classmethod
    def from_nodes(cls, nodes: Iterable[UserNode]) -> "UserGraphIndex":
        """Build an index from prepared nodes (later duplicates win)."""
        return cls(nodes={node.user_id: node for node in nodes})

    @classmethod
    def from_users(cls, users: Iterable["User"]) -> "UserGraphIndex":
        """
        Build an index from User rows.

        Children are derived from parent_id, in the order the users are
        given (registration order when loaded by the repository).

        Args:
            users: Full user population

        Returns:
            Index over every user
        """
        users = list(users)
        children: dict[str, list[str]] = {}
        for user in users:
            if user.parent_id is not None:
                children.setdefault(user.parent_id, []).append(user.user_id)

        nodes = {
            user.user_id: UserNode(
                user_id=user.user_id,
                referred_ids=tuple(children.get(user.user_id, ())),
                self_points=user.self_points or Decimal("0"),
                total_self_points=user.total_self_points or Decimal("0"),
                name=user.name or "",
            )
            for user in users
        }

        orphans = set(children) - set(nodes)
        if orphans:
            logger.warning(
                "Referral index has children of unknown parents",
                extra={"parent_ids": sorted(orphans)},
            )

        return cls(nodes=nodes)

    @classmethod
    async def build(cls, user_repo: "UserRepository") -> "UserGraphIndex":
        """
        Load the whole population and build the index.

        Storage errors propagate: a partial index is never returned.

        Args:
            user_repo: User repository bound to the current session

        Returns:
            Fresh index
        """
        users = await user_repo.find_all()
        index = cls.from_users(users)
        logger.debug(
            "Referral index built", extra={"users": len(index)}
        )
        return index

    def get(self, user_id: str) -> UserNode | None:
        """Look up a node."""
        return self.nodes.get(user_id)

    def children_of(self, user_id: str) -> list[UserNode]:
        """
        Direct children present in the index, unique, in order.

        A user listed among its own children is left out.
        """
        node = self.nodes.get(user_id)
        if node is None:
            return []
        seen: set[str] = set()
        result = []
        for child_id in node.referred_ids:
            child = self.nodes.get(child_id)
            if child is None or child_id in seen or child_id == user_id:
                continue
            seen.add(child_id)
            result.append(child)
        return result

    def __contains__(self, user_id: object) -> bool:
        return user_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[UserNode]:
        return iter(self.nodes.values())
