"""Comment Tree - adjacency-list helpers for threaded comments.

Invariants:
    - A thread is identified by comment_group_id == id of its root comment
    - collect_descendants never recurses: explicit stack, depth-first order
    - Cycles in bad data cannot loop forever (visited set)
"""

from collections import defaultdict
from collections.abc import Iterable


def resolve_group_id(parent_group_id: int | None, own_id: int) -> int:
    """A reply joins its parent's thread; a root starts its own."""
    return parent_group_id if parent_group_id is not None else own_id


def collect_descendants(
    root_id: int, edges: Iterable[tuple[int, int | None]],
) -> list[int]:
    """Ids of every comment below root_id, depth-first.

    edges is (comment_id, parent_id) for the candidate comments, normally
    every comment of the root's thread.
    """
    children: dict[int, list[int]] = defaultdict(list)
    for comment_id, parent_id in edges:
        if parent_id is not None:
            children[parent_id].append(comment_id)
    for siblings in children.values():
        siblings.sort()

    result: list[int] = []
    visited = {root_id}
    stack = list(reversed(children.get(root_id, [])))
    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)
        result.append(current)
        stack.extend(reversed(children.get(current, [])))
    return result
