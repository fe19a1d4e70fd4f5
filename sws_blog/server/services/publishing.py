"""
Scheduled publishing loop.

Periodically publishes scheduled posts whose time has come. Started from the
application lifespan and cancelled on shutdown.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sws_blog.core.logging_config import get_logger

from .content_admin import ContentAdminService

logger = get_logger(__name__)


async def publish_due_posts(session_factory: async_sessionmaker[AsyncSession]) -> int:
    async with session_factory() as session:
        return await ContentAdminService(session).publish_due()


async def run_publish_loop(
    session_factory: async_sessionmaker[AsyncSession],
    interval: float,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> None:
    """Publish due posts every ``interval`` seconds until cancelled.

    A failed pass is logged and retried on the next tick.
    """
    logger.info(f"Scheduled publishing loop started (every {interval}s)")
    while True:
        try:
            await publish_due_posts(session_factory)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Scheduled publishing pass failed: {e}", exc_info=True)
        await sleep(interval)
