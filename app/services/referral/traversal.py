"""
Downline traversal.

Depth-first walk over the referral graph using an explicit stack of child
iterators, so deep chains never hit the interpreter recursion limit. The
visited set is owned by one walk (one root query) and never shared.
"""

from collections.abc import Iterator

from loguru import logger

from app.services.referral.graph_index import UserGraphIndex, UserNode


def walk_downline(
    index: UserGraphIndex,
    root_id: str,
    max_level: int,
    node_limit: int | None = None,
) -> Iterator[tuple[UserNode, int]]:
    """
    Yield (descendant, level) pairs below a root, depth first.

    The root is level 1 and its direct children level 2. Descendants deeper
    than max_level are not reached. A node already visited during this walk
    (a cycle in malformed data) is skipped together with its subtree.
    Children missing from the index are skipped.

    Args:
        index: Referral graph index
        root_id: User id of the query root
        max_level: Deepest relative level to yield
        node_limit: Stop after this many descendants (None for unbounded)

    Yields:
        Tuples of (node, relative level)
    """
    root = index.get(root_id)
    if root is None or max_level < 2:
        return

    visited = {root_id}
    stack: list[tuple[Iterator[str], int]] = [(iter(root.referred_ids), 1)]
    yielded = 0

    while stack:
        children, level = stack[-1]
        child_id = next(children, None)
        if child_id is None:
            stack.pop()
            continue

        if child_id in visited:
            logger.debug(
                "Referral walk skipped repeated node",
                extra={"root_id": root_id, "user_id": child_id},
            )
            continue

        child = index.get(child_id)
        if child is None:
            continue

        visited.add(child_id)
        child_level = level + 1

        if node_limit is not None and yielded >= node_limit:
            logger.warning(
                "Referral walk truncated at node limit",
                extra={"root_id": root_id, "node_limit": node_limit},
            )
            return

        yielded += 1
        yield child, child_level

        if child_level < max_level and child.referred_ids:
            stack.append((iter(child.referred_ids), child_level))
