from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from notion_mirror.models.node import Node

DATABASE = "database"
BLOCK_CHILDREN = "block_children"


@dataclass(frozen=True)
class ListingTarget:
    """A paginated listing on the source: a database's rows or a block's children."""

    kind: str
    id: str

    @classmethod
    def database(cls, database_id: str) -> "ListingTarget":
        return cls(DATABASE, database_id)

    @classmethod
    def block_children(cls, block_id: str) -> "ListingTarget":
        return cls(BLOCK_CHILDREN, block_id)

    def __str__(self) -> str:
        return f"{self.kind}:{self.id}"


@dataclass
class ListingPage:
    results: List[Node] = field(default_factory=list)
    has_more: bool = False
    next_cursor: Optional[str] = None


@dataclass
class FetchError:
    """A listing that ended early; the items fetched before it are kept."""

    target: ListingTarget
    message: str
    fetched: int
    status_code: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["target"] = str(self.target)
        return d


class ContentSource:
    """Minimal source contract.

    Implementations return one page of a listing per call and raise
    RemoteFetchError when the request fails.
    """

    name: str = "base"

    def list_page(self, target: ListingTarget, cursor: Optional[str] = None) -> ListingPage:
        raise NotImplementedError

    def close(self) -> None:
        pass
