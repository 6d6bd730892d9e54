from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from notion_mirror.errors import RemoteFetchError
from notion_mirror.models.node import Node

from .base import ContentSource, FetchError, ListingTarget

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    items: List[Node] = field(default_factory=list)
    errors: List[FetchError] = field(default_factory=list)
    requests: int = 0

    @property
    def complete(self) -> bool:
        return not self.errors


class PaginatedFetcher:
    """Drain a cursor-paginated listing into one ordered sequence.

    A failed page request ends that listing: whatever was accumulated so far is
    returned along with a FetchError. There is no retry.
    """

    def __init__(self, source: ContentSource) -> None:
        self.source = source

    def fetch_all(self, target: ListingTarget) -> FetchResult:
        result = FetchResult()
        cursor: Optional[str] = None
        while True:
            logger.debug("Fetching %s (cursor: %s)", target, cursor or "start")
            result.requests += 1
            try:
                page = self.source.list_page(target, cursor)
            except RemoteFetchError as exc:
                logger.error("Error fetching %s after %d items: %s", target, len(result.items), exc)
                result.errors.append(
                    FetchError(
                        target=target,
                        message=str(exc),
                        fetched=len(result.items),
                        status_code=exc.status_code,
                    )
                )
                break
            result.items.extend(page.results)
            logger.debug("Fetched %d items from %s, has_more: %s", len(page.results), target, page.has_more)
            if not page.has_more:
                break
            if not page.next_cursor:
                # has_more without a cursor would restart the listing from the top
                logger.warning("Listing %s reported has_more without next_cursor; stopping", target)
                result.errors.append(
                    FetchError(target=target, message="has_more without next_cursor", fetched=len(result.items))
                )
                break
            cursor = page.next_cursor
        return result
