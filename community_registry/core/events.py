from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI
from loguru import logger

from community_registry.core.config import PHOTOS_BUCKET
from community_registry.core.db.session import dispose_engine
from community_registry.core.errors import UpstreamFailure
from community_registry.core.storage import get_storage


async def preload_storage() -> None:
    """
    Builds the storage client once per worker and reports whether the
    photos bucket is reachable. A failure is logged, not fatal.
    """
    storage = get_storage()
    try:
        if await storage.bucket_exists(PHOTOS_BUCKET):
            logger.info(f"Photos bucket {PHOTOS_BUCKET!r} is reachable")
        else:
            logger.warning(f"Photos bucket {PHOTOS_BUCKET!r} does not exist")
    except UpstreamFailure as e:
        logger.warning(f"Photos bucket check failed: {e.detail}")


def create_start_app_handler(app: FastAPI) -> Callable:
    async def start_app() -> None:
        await preload_storage()

    return start_app


def create_stop_app_handler(app: FastAPI) -> Callable:
    async def stop_app() -> None:
        await dispose_engine()

    return stop_app


def create_lifespan(preload: bool) -> Callable:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if preload:
            await create_start_app_handler(app)()
        yield
        await create_stop_app_handler(app)()

    return lifespan
