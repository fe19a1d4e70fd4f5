"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging, retired URLs), registers exception handlers and includes all
API routers. Background work (scheduled publishing and the admin new-chat
notification center) is started and stopped by the lifespan.
"""

import asyncio
from contextlib import asynccontextmanager, suppress

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sws_blog import __version__
from sws_blog.core.database import async_session_maker, init_db
from sws_blog.core.logging_config import get_logger, setup_logging
from sws_blog.core.monitoring import initialize_logfire

from .api.v1 import (
    admin_content,
    admin_live_chat,
    admin_submissions,
    ai_content,
    booking,
    forms,
    health,
    live_chat,
    site,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import GoneUrlMiddleware, LogfireMiddleware
from .services.auth import require_admin
from .services.deps import get_broker, get_notification_center
from .services.publishing import run_publish_loop

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Checks the database, then runs the scheduled publishing loop and the admin
    notification center as background tasks until shutdown.
    """
    # Startup
    try:
        logger.info("Starting up sws-blog server...")
        await init_db()
        logger.info("Database connection verified")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    tasks = [asyncio.create_task(get_notification_center().follow(get_broker()), name="chat-notifications")]
    interval = settings.scheduled_publish_interval_seconds
    if interval > 0:
        tasks.append(
            asyncio.create_task(run_publish_loop(async_session_maker, interval), name="scheduled-publishing")
        )
    else:
        logger.info("Scheduled publishing loop disabled")

    yield

    # Shutdown
    logger.info("Shutting down sws-blog server...")
    for task in tasks:
        task.cancel()
    for task in tasks:
        with suppress(asyncio.CancelledError):
            await task


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    sws-blog API

    Backend of the Solve with Software marketing site: public blog content, the
    admin content dashboard, contact and newsletter forms, AI content assist,
    live chat with realtime updates, and meeting booking.
    """,
    version=__version__,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors.origins,
    allow_credentials=settings.cors.allow_credentials,
    allow_methods=settings.cors.allow_methods,
    allow_headers=settings.cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)
app.add_middleware(GoneUrlMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)

admin_guard = [Depends(require_admin)]

app.include_router(health.router, tags=["health"])
app.include_router(site.router, prefix=constant.API_V1_STR, tags=["site"])
app.include_router(forms.router, prefix=constant.API_V1_STR, tags=["forms"])
app.include_router(live_chat.router, prefix=f"{constant.API_V1_STR}/live-chat", tags=["live-chat"])
app.include_router(booking.router, prefix=f"{constant.API_V1_STR}/booking", tags=["booking"])
app.include_router(admin_content.router, prefix=constant.ADMIN_PREFIX, tags=["admin"], dependencies=admin_guard)
app.include_router(admin_submissions.router, prefix=constant.ADMIN_PREFIX, tags=["admin"], dependencies=admin_guard)
app.include_router(
    admin_live_chat.router, prefix=f"{constant.ADMIN_PREFIX}/live-chat", tags=["admin-live-chat"], dependencies=admin_guard
)
app.include_router(ai_content.router, prefix=f"{constant.ADMIN_PREFIX}/ai", tags=["admin-ai"], dependencies=admin_guard)
