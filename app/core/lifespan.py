import contextlib
from contextlib import asynccontextmanager
import asyncio
import logging

from app.analytics.db import init_db, purge_old_records
from app.core.career_path_store import init_store
from app.core.config.career_path import get_career_path_config

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    config = get_career_path_config()
    logger.info("career_path_config_loaded version=%s domains=%s", config.get("version"), len(config.get("domains", [])))
    init_db()
    init_store()

    stop_event = asyncio.Event()

    async def periodic_purge() -> None:
        while not stop_event.is_set():
            try:
                deleted = purge_old_records()
                if any(deleted.values()):
                    logger.info("telemetry_retention_purge deleted=%s", deleted)
            except Exception as exc:  # pragma: no cover
                logger.warning("telemetry_retention_purge_failed: %s", exc)
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=3600)
            except asyncio.TimeoutError:
                continue

    purge_task = asyncio.create_task(periodic_purge())
    yield
    stop_event.set()
    if not purge_task.done():
        purge_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await purge_task
