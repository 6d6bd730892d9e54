"""Search the mirrored forest by node id."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from notion_mirror.models.node import Node


def iter_nodes(forest: Iterable[Node]) -> Iterator[Node]:
    """Yield every node depth-first: the node, then its children, then its pages."""
    for node in forest:
        yield node
        yield from iter_nodes(node.descendants())


def find_by_id(forest: Iterable[Node], node_id: str) -> Optional[Node]:
    """Return the first node carrying node_id in document order, or None."""
    for node in iter_nodes(forest):
        if node.id == node_id:
            return node
    return None


def count_nodes(forest: Iterable[Node]) -> int:
    return sum(1 for _ in iter_nodes(forest))
