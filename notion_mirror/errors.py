"""Error types shared by the sync engine, the snapshot store and the routers.

Fetch errors are recovered where they happen (see PaginatedFetcher); snapshot
errors travel up to the request boundary and become HTTP 500 responses.
"""

from __future__ import annotations

from typing import Optional


class RemoteFetchError(RuntimeError):
    """A single listing page request against the content source failed."""

    def __init__(self, message: str, *, target_id: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.target_id = target_id
        self.status_code = status_code


class PersistError(RuntimeError):
    """Writing the snapshot to disk failed; the previous snapshot is untouched."""


class SnapshotUnavailable(RuntimeError):
    """No snapshot exists yet, or it cannot be read."""


class SnapshotCorrupt(ValueError):
    """The snapshot exists but does not decode to a forest of nodes."""
