from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, Optional

from notion_mirror.config import Settings, get_settings
from notion_mirror.errors import PersistError, RemoteFetchError, SnapshotCorrupt, SnapshotUnavailable
from notion_mirror.services.article_lookup import find_by_id
from notion_mirror.services.snapshot_store import SnapshotStore

from .base import ContentSource
from .pagination import PaginatedFetcher
from .replicator import TreeReplicator

logger = logging.getLogger(__name__)


def build_source(settings: Settings) -> ContentSource:
    """Create a Notion client for a CLI run; raises RuntimeError without an API key."""
    from notion_mirror.services.notion_client import NotionClient

    return NotionClient(
        api_key=settings.notion_api_key or "",
        base_url=settings.base_url,
        notion_version=settings.notion_version,
        timeout=settings.timeout,
    )


def run_fetch(
    source: ContentSource,
    database_id: str,
    store: SnapshotStore,
    *,
    max_depth: int,
    overall_depth_limit: int,
) -> Dict[str, Any]:
    """Replicate the root database and persist the forest.

    RemoteFetchError (root listing failed with nothing fetched) and
    PersistError propagate to the caller; the snapshot is only replaced
    after a complete replication.
    """
    replicator = TreeReplicator(
        PaginatedFetcher(source),
        max_depth=max_depth,
        overall_depth_limit=overall_depth_limit,
    )
    result = replicator.replicate(database_id)
    path = store.save(result.forest)
    return {"path": path, **result.summary()}


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Mirror a Notion database into a JSON snapshot")
    sub = parser.add_subparsers(dest="cmd", required=True)
    settings = get_settings()

    fetch = sub.add_parser("fetch", help="Run one full fetch and write the snapshot")
    fetch.add_argument("--database-id", default=settings.database_id, help="Root database id (default: NOTION_DATABASE_ID)")
    fetch.add_argument("--out", default=settings.snapshot_path, help="Snapshot path (default: SNAPSHOT_PATH)")
    fetch.add_argument("--max-depth", type=int, default=settings.max_depth)
    fetch.add_argument("--overall-depth-limit", type=int, default=settings.overall_depth_limit)

    show = sub.add_parser("show", help="Print one node from the snapshot as JSON")
    show.add_argument("node_id", help="Page, database or block id")
    show.add_argument("--snapshot", default=settings.snapshot_path, help="Snapshot path (default: SNAPSHOT_PATH)")

    args = parser.parse_args(argv)
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    if args.cmd == "fetch":
        if not args.database_id:
            parser.error("--database-id is required when NOTION_DATABASE_ID is not set")
        try:
            source = build_source(settings)
        except RuntimeError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        try:
            summary = run_fetch(
                source,
                args.database_id,
                SnapshotStore(args.out),
                max_depth=args.max_depth,
                overall_depth_limit=args.overall_depth_limit,
            )
        except (RemoteFetchError, PersistError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        finally:
            source.close()
        print(summary["path"])
        for warning in summary["warnings"]:
            print(f"warning: partial listing {warning['target']}: {warning['message']}", file=sys.stderr)
        return 0

    if args.cmd == "show":
        try:
            forest = SnapshotStore(args.snapshot).load()
        except (SnapshotUnavailable, SnapshotCorrupt) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
        node = find_by_id(forest, args.node_id)
        if node is None:
            print(f"Article not found: {args.node_id}", file=sys.stderr)
            return 1
        print(json.dumps(node.to_dict(), ensure_ascii=False, indent=2))
        return 0

    parser.error("unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
