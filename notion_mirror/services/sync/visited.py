from __future__ import annotations

from typing import Iterable, Set


class VisitedSet:
    """Ids already expanded during one replication run.

    Runs are sequential internally, so plain set semantics are enough; create
    one instance per run and pass it down every recursive call.
    """

    def __init__(self, ids: Iterable[str] = ()) -> None:
        self._ids: Set[str] = set(ids)

    def mark_visited(self, node_id: str) -> bool:
        """Record node_id; return False if it was already recorded."""
        if node_id in self._ids:
            return False
        self._ids.add(node_id)
        return True

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)
