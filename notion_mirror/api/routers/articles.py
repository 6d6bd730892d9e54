import logging

from fastapi import APIRouter, HTTPException

from notion_mirror.config import get_settings
from notion_mirror.errors import PersistError, RemoteFetchError, SnapshotCorrupt, SnapshotUnavailable
from notion_mirror.models.node import forest_to_list
from notion_mirror.services.article_lookup import find_by_id
from notion_mirror.services.notion_client import get_notion_client
from notion_mirror.services.snapshot_store import get_snapshot_store
from notion_mirror.services.sync.runner import run_fetch

logger = logging.getLogger(__name__)

router = APIRouter(tags=["articles"])


@router.get("/api/fetch-articles")
def api_fetch_articles():
    """Mirror the configured Notion database into the snapshot file."""
    settings = get_settings()
    if not settings.database_id:
        raise HTTPException(status_code=500, detail="NOTION_DATABASE_ID is not configured")
    try:
        source = get_notion_client()
    except RuntimeError as exc:
        raise HTTPException(status_code=500, detail=f"Notion client unavailable: {exc}")
    try:
        summary = run_fetch(
            source,
            settings.database_id,
            get_snapshot_store(),
            max_depth=settings.max_depth,
            overall_depth_limit=settings.overall_depth_limit,
        )
    except RemoteFetchError as exc:
        logger.error("Error fetching data from Notion: %s", exc)
        raise HTTPException(status_code=500, detail=f"Error fetching data from Notion: {exc}")
    except PersistError as exc:
        raise HTTPException(status_code=500, detail=f"Error saving data to snapshot: {exc}")
    summary.pop("path", None)
    return {"status": "ok", "message": "Data successfully fetched and saved", **summary}


@router.get("/api/articles")
def api_get_articles():
    try:
        return forest_to_list(get_snapshot_store().load())
    except SnapshotUnavailable as exc:
        raise HTTPException(status_code=500, detail=f"Snapshot unavailable: {exc}")
    except SnapshotCorrupt as exc:
        raise HTTPException(status_code=500, detail=f"Error parsing snapshot: {exc}")


@router.get("/api/article/{article_id}")
def api_get_article(article_id: str):
    try:
        forest = get_snapshot_store().load()
    except SnapshotUnavailable as exc:
        raise HTTPException(status_code=500, detail=f"Snapshot unavailable: {exc}")
    except SnapshotCorrupt as exc:
        raise HTTPException(status_code=500, detail=f"Error parsing snapshot: {exc}")
    article = find_by_id(forest, article_id)
    if article is None:
        logger.info("Article not found for id %s", article_id)
        raise HTTPException(status_code=404, detail="Article not found")
    return article.to_dict()


@router.get("/health")
def api_health():
    return {"status": "ok", "snapshot": get_snapshot_store().exists()}
