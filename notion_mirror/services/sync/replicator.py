"""Recursive replication of a Notion database into an in-memory forest.

Depth is counted in hops from the top-level node: ``expand(node, depth)`` is
called for a node sitting ``depth`` hops below its top-level ancestor and its
children land at ``depth + 1``. Database rows sit one hop below their
database block. A node is only expanded while its depth is below the smaller
of ``max_depth`` and ``overall_depth_limit``.

Provider nodes are never mutated; every expanded node is a fresh copy with
``children`` (or ``pages``) set.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from notion_mirror.errors import RemoteFetchError
from notion_mirror.models.node import Forest, Node, NodeKind
from notion_mirror.services.article_lookup import count_nodes

from .base import FetchError, ListingTarget
from .pagination import FetchResult, PaginatedFetcher
from .visited import VisitedSet

logger = logging.getLogger(__name__)

EXPANDABLE_TOP_LEVEL_OBJECTS = ("page", "block")


@dataclass
class ReplicationRun:
    """State scoped to a single fetch run."""

    visited: VisitedSet = field(default_factory=VisitedSet)
    errors: List[FetchError] = field(default_factory=list)
    requests: int = 0
    skipped_depth: int = 0
    skipped_visited: int = 0

    def absorb(self, result: FetchResult) -> None:
        self.errors.extend(result.errors)
        self.requests += result.requests


@dataclass
class ReplicationResult:
    forest: Forest
    errors: List[FetchError]
    requests: int = 0

    @property
    def top_level(self) -> int:
        return len(self.forest)

    @property
    def nodes(self) -> int:
        return count_nodes(self.forest)

    def summary(self) -> Dict[str, Any]:
        return {
            "top_level": self.top_level,
            "nodes": self.nodes,
            "requests": self.requests,
            "warnings": [e.to_dict() for e in self.errors],
        }


class TreeReplicator:
    def __init__(
        self,
        fetcher: PaginatedFetcher,
        *,
        max_depth: int = 5,
        overall_depth_limit: int = 7,
    ) -> None:
        self.fetcher = fetcher
        self.max_depth = int(max_depth)
        self.overall_depth_limit = int(overall_depth_limit)

    @property
    def depth_bound(self) -> int:
        return min(self.max_depth, self.overall_depth_limit)

    def replicate(self, root_database_id: str) -> ReplicationResult:
        """List the root database and expand every top-level page or block.

        Raises RemoteFetchError only when the root listing failed before any
        item was obtained; every other fetch failure is kept in ``errors``.
        """
        run = ReplicationRun()
        logger.info("Fetching top-level pages from database %s", root_database_id)
        listing = self.fetcher.fetch_all(ListingTarget.database(root_database_id))
        run.absorb(listing)
        if not listing.complete and not listing.items:
            err = listing.errors[0]
            raise RemoteFetchError(
                f"Failed to list root database {root_database_id}: {err.message}",
                target_id=root_database_id,
                status_code=err.status_code,
            )

        forest: Forest = []
        for page in listing.items:
            if page.object in EXPANDABLE_TOP_LEVEL_OBJECTS:
                logger.debug("Processing top-level %s %s", page.object, page.id)
                children = self._expand(page, 0, run)
                if children is not None:
                    page = page.model_copy(update={"children": children})
            forest.append(page)

        result = ReplicationResult(forest=forest, errors=run.errors, requests=run.requests)
        logger.info(
            "Replicated %d top-level items, %d nodes, %d requests (%d depth-limited, %d revisits skipped, %d partial listings)",
            result.top_level,
            result.nodes,
            run.requests,
            run.skipped_depth,
            run.skipped_visited,
            len(run.errors),
        )
        return result

    def expand(self, node: Node, depth: int = 0, run: Optional[ReplicationRun] = None) -> List[Node]:
        """Return node's children, each expanded in turn; [] when not expandable."""
        return self._expand(node, depth, run if run is not None else ReplicationRun()) or []

    def _within_bound(self, depth: int) -> bool:
        return depth < self.max_depth and depth < self.overall_depth_limit

    def _expand(self, node: Node, depth: int, run: ReplicationRun) -> Optional[List[Node]]:
        # None means "not expanded"; callers then leave the attribute unset
        if not self._within_bound(depth):
            logger.debug("Reached depth bound (%d) for %s", self.depth_bound, node.id)
            run.skipped_depth += 1
            return None
        if not run.visited.mark_visited(node.id):
            logger.debug("Skipping already visited %s", node.id)
            run.skipped_visited += 1
            return None

        logger.debug("Fetching children of %s at depth %d", node.id, depth)
        listing = self.fetcher.fetch_all(ListingTarget.block_children(node.id))
        run.absorb(listing)

        children: List[Node] = []
        for child in listing.items:
            kind = child.kind
            if kind is NodeKind.DATABASE:
                pages = self._expand_database(child, depth + 1, run)
                if pages is not None:
                    child = child.model_copy(update={"pages": pages})
            elif kind in (NodeKind.PAGE, NodeKind.CONTAINER):
                grandchildren = self._expand(child, depth + 1, run)
                if grandchildren is not None:
                    child = child.model_copy(update={"children": grandchildren})
            children.append(child)
        return children

    def _expand_database(self, database: Node, depth: int, run: ReplicationRun) -> Optional[List[Node]]:
        if not self._within_bound(depth):
            run.skipped_depth += 1
            return None
        if not run.visited.mark_visited(database.id):
            run.skipped_visited += 1
            return None

        logger.debug("Fetching rows of database %s at depth %d", database.id, depth)
        listing = self.fetcher.fetch_all(ListingTarget.database(database.id))
        run.absorb(listing)

        rows: List[Node] = []
        for row in listing.items:
            row_children = self._expand(row, depth + 1, run)
            if row_children is not None:
                row = row.model_copy(update={"children": row_children})
            rows.append(row)
        return rows
