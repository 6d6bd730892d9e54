from typing import Dict, List, Optional

import pytest

from notion_mirror.errors import RemoteFetchError
from notion_mirror.models.node import Node
from notion_mirror.services.sync.base import ContentSource, ListingPage, ListingTarget


def page(page_id: str, **extra) -> Dict:
    return {"object": "page", "id": page_id, "properties": {"title": page_id}, **extra}


def block(block_id: str, type_: str = "paragraph", has_children: bool = False) -> Dict:
    return {
        "object": "block",
        "id": block_id,
        "type": type_,
        "has_children": has_children,
        type_: {"rich_text": [{"plain_text": f"text of {block_id}"}]},
    }


def child_page(block_id: str) -> Dict:
    return {"object": "block", "id": block_id, "type": "child_page", "has_children": True, "child_page": {"title": block_id}}


def child_database(block_id: str) -> Dict:
    return {"object": "block", "id": block_id, "type": "child_database", "has_children": False, "child_database": {"title": block_id}}


class FakeSource(ContentSource):
    """In-memory paginated source; cursors are string offsets."""

    name = "fake"

    def __init__(self, page_size: int = 2) -> None:
        self.page_size = page_size
        self.listings: Dict[ListingTarget, List[Dict]] = {}
        self.failures: Dict[ListingTarget, int] = {}
        self.calls: List[tuple] = []

    def add_rows(self, database_id: str, items: List[Dict]) -> "FakeSource":
        self.listings[ListingTarget.database(database_id)] = items
        return self

    def add_children(self, block_id: str, items: List[Dict]) -> "FakeSource":
        self.listings[ListingTarget.block_children(block_id)] = items
        return self

    def fail_on(self, target: ListingTarget, page_index: int = 0) -> "FakeSource":
        self.failures[target] = page_index
        return self

    def requested(self, target: ListingTarget) -> int:
        return sum(1 for t, _ in self.calls if t == target)

    def list_page(self, target: ListingTarget, cursor: Optional[str] = None) -> ListingPage:
        self.calls.append((target, cursor))
        start = int(cursor) if cursor else 0
        if self.failures.get(target) == start // self.page_size:
            raise RemoteFetchError(f"boom on {target}", target_id=target.id, status_code=502)
        items = self.listings.get(target, [])
        chunk = items[start:start + self.page_size]
        end = start + len(chunk)
        has_more = end < len(items)
        return ListingPage(
            results=[Node.model_validate(i) for i in chunk],
            has_more=has_more,
            next_cursor=str(end) if has_more else None,
        )


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def snapshot_path(tmp_path, monkeypatch) -> str:
    path = str(tmp_path / "articles.json")
    monkeypatch.setenv("SNAPSHOT_PATH", path)
    return path
