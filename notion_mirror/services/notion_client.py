"""Thin Notion REST client used as the mirror's content source.

Only the two listing endpoints the mirror needs are wrapped:

- POST /databases/{id}/query        rows of a database
- GET  /blocks/{id}/children        children of a page or block

Both are cursor-paginated ({results, has_more, next_cursor}). Every failure
(transport error, timeout, non-2xx status, undecodable body) is raised as
RemoteFetchError; callers decide whether partial data is acceptable.

Usage:
    from notion_mirror.services.notion_client import get_notion_client
    client = get_notion_client()
    page = client.list_page(ListingTarget.database("..."))
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from notion_mirror.config import Settings, get_settings
from notion_mirror.errors import RemoteFetchError
from notion_mirror.models.node import Node
from notion_mirror.services.sync.base import BLOCK_CHILDREN, DATABASE, ContentSource, ListingPage, ListingTarget

MAX_PAGE_SIZE = 100


class NotionClient(ContentSource):
    name = "notion"

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://api.notion.com/v1",
        notion_version: str = "2022-06-28",
        timeout: float = 10.0,
        page_size: int = MAX_PAGE_SIZE,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not api_key:
            raise RuntimeError("Missing Notion API key. Set NOTION_API_KEY.")
        self.base_url = base_url.rstrip("/")
        self.page_size = max(1, min(int(page_size), MAX_PAGE_SIZE))
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Notion-Version": notion_version,
            "User-Agent": "notion-mirror/0.1",
        }
        self._client = client or httpx.Client(timeout=float(timeout))

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "NotionClient":
        settings.require_notion()
        return cls(
            api_key=settings.notion_api_key or "",
            base_url=settings.base_url,
            notion_version=settings.notion_version,
            timeout=settings.timeout,
            **kwargs,
        )

    def close(self) -> None:
        self._client.close()

    # --- Public API ---
    def query_database(self, database_id: str, start_cursor: Optional[str] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"page_size": self.page_size}
        if start_cursor:
            body["start_cursor"] = start_cursor
        return self._request("POST", f"/databases/{database_id}/query", database_id, json=body)

    def list_block_children(self, block_id: str, start_cursor: Optional[str] = None) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page_size": self.page_size}
        if start_cursor:
            params["start_cursor"] = start_cursor
        return self._request("GET", f"/blocks/{block_id}/children", block_id, params=params)

    def list_page(self, target: ListingTarget, cursor: Optional[str] = None) -> ListingPage:
        if target.kind == DATABASE:
            data = self.query_database(target.id, cursor)
        elif target.kind == BLOCK_CHILDREN:
            data = self.list_block_children(target.id, cursor)
        else:
            raise ValueError(f"Unsupported listing kind: {target.kind}")
        return self._parse_listing(data, target)

    # --- Internals ---
    def _request(self, method: str, path: str, target_id: str, **kwargs: Any) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            resp = self._client.request(method, url, headers=self.headers, **kwargs)
        except httpx.HTTPError as exc:
            raise RemoteFetchError(f"{method} {path} failed: {exc}", target_id=target_id) from exc
        if resp.status_code >= 400:
            raise RemoteFetchError(
                f"{method} {path} returned {resp.status_code}: {self._error_message(resp)}",
                target_id=target_id,
                status_code=resp.status_code,
            )
        try:
            data = resp.json()
        except ValueError as exc:
            raise RemoteFetchError(f"{method} {path} returned a non-JSON body", target_id=target_id) from exc
        if not isinstance(data, dict):
            raise RemoteFetchError(f"{method} {path} returned an unexpected payload", target_id=target_id)
        return data

    @staticmethod
    def _error_message(resp: httpx.Response) -> str:
        try:
            payload = resp.json()
        except ValueError:
            return resp.text[:200]
        if isinstance(payload, dict):
            return str(payload.get("message") or payload.get("code") or payload)
        return str(payload)

    @staticmethod
    def _parse_listing(data: Dict[str, Any], target: ListingTarget) -> ListingPage:
        results = data.get("results")
        if not isinstance(results, list):
            raise RemoteFetchError(f"Listing {target} has no results array", target_id=target.id)
        try:
            nodes = [Node.model_validate(item) for item in results]
        except ValidationError as exc:
            raise RemoteFetchError(f"Listing {target} returned malformed items: {exc}", target_id=target.id) from exc
        return ListingPage(
            results=nodes,
            has_more=bool(data.get("has_more")),
            next_cursor=data.get("next_cursor") or None,
        )


_client_cache: Optional[NotionClient] = None
# sync routes run in a threadpool; only one thread may build the shared client
_client_lock = threading.Lock()


def get_notion_client() -> NotionClient:
    global _client_cache
    with _client_lock:
        if _client_cache is None:
            _client_cache = NotionClient.from_settings(get_settings())
        return _client_cache


def close_notion_client() -> None:
    global _client_cache
    with _client_lock:
        if _client_cache is not None:
            _client_cache.close()
            _client_cache = None
