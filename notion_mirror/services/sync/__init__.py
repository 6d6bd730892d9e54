"""Notion mirroring engine.

Structure:
- base.py: listing targets, listing pages and the content source contract
- pagination.py: drains a cursor-paginated listing into one ordered sequence
- visited.py: run-scoped set of already expanded node ids
- replicator.py: depth- and cycle-bounded recursive expansion of the root database
- runner.py: fetch-run entrypoint shared by the API and a tiny CLI

The Notion HTTP client lives in services/notion_client.py; anything that
implements ContentSource.list_page can stand in for it (tests use in-memory
sources).
"""

from .base import ContentSource, FetchError, ListingPage, ListingTarget
from .pagination import FetchResult, PaginatedFetcher
from .replicator import ReplicationResult, ReplicationRun, TreeReplicator
from .visited import VisitedSet

__all__ = [
    "ContentSource",
    "FetchError",
    "FetchResult",
    "ListingPage",
    "ListingTarget",
    "PaginatedFetcher",
    "ReplicationResult",
    "ReplicationRun",
    "TreeReplicator",
    "VisitedSet",
]
