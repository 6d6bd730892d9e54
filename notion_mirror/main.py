import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from notion_mirror.config import get_settings
from notion_mirror.services.notion_client import close_notion_client

# Routers
from notion_mirror.api.routers.articles import router as articles_router


def configure_logging() -> None:
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Close the shared Notion HTTP client on shutdown."""
    configure_logging()
    try:
        yield
    finally:
        close_notion_client()


app = FastAPI(title="Notion Mirror", version="0.1", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(articles_router)
