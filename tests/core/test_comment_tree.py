"""Comment Tree - tests for thread grouping and iterative descendant collection.

Tests cover:
    - resolve_group_id: roots start a thread, replies join their parent's
    - collect_descendants: depth-first order, deep chains, unrelated threads ignored
    - collect_descendants survives cyclic data
"""

from plub.core.comment_tree import collect_descendants, resolve_group_id


def test_root_comment_starts_its_own_group():
    assert resolve_group_id(None, 7) == 7


def test_reply_joins_parent_group():
    assert resolve_group_id(3, 9) == 3


def test_collect_descendants_depth_first():
    edges = [(1, None), (2, 1), (3, 1), (4, 2), (5, 4), (6, None), (7, 6)]
    assert collect_descendants(1, edges) == [2, 4, 5, 3]


def test_collect_descendants_leaf_has_none():
    edges = [(1, None), (2, 1)]
    assert collect_descendants(2, edges) == []


def test_collect_descendants_deep_chain_does_not_recurse():
    depth = 5000
    edges = [(1, None)] + [(i, i - 1) for i in range(2, depth + 1)]
    result = collect_descendants(1, edges)
    assert len(result) == depth - 1
    assert result[-1] == depth


def test_collect_descendants_stops_on_cycle():
    edges = [(1, 3), (2, 1), (3, 2)]
    assert sorted(collect_descendants(1, edges)) == [2, 3]
