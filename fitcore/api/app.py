"""FastAPI application factory for fitcore."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from fitcore import __version__
from fitcore.api.errors import register_exception_handlers
from fitcore.api.middleware import request_id_middleware
from fitcore.api.routes import exercises, gyms, machines, reports, search, system, videos
from fitcore.config import config
from fitcore.core.logging import logger
from fitcore.infrastructure.database import Repositories, build_repositories
from fitcore.infrastructure.rate_limit import Limiter, build_limiter
from fitcore.infrastructure.storage import ObjectStorage, build_object_storage
from fitcore.infrastructure.store import RedisClient


def _default_limiters():
    redis_client = RedisClient().client if config.rate_limit_backend() == "redis" else None
    upload = build_limiter(
        "videos:upload",
        config.upload_rate_limit(),
        config.upload_rate_interval_seconds(),
        redis_client,
    )
    report = build_limiter(
        "reports",
        config.report_rate_limit(),
        config.report_rate_interval_seconds(),
        redis_client,
    )
    return upload, report


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Release the shared Redis pool on shutdown."""
    yield
    if config.rate_limit_backend() == "redis":
        await RedisClient().close()


def create_app(
    repositories: Optional[Repositories] = None,
    object_storage: Optional[ObjectStorage] = None,
    upload_limiter: Optional[Limiter] = None,
    report_limiter: Optional[Limiter] = None,
) -> FastAPI:
    """Create and configure FastAPI app. Factory pattern for testability.

    Collaborators not passed in are built from configuration; a bad rate
    limit or backend setting fails here, at startup.
    """
    app = FastAPI(
        title="fitcore",
        description=(
            "Gym discovery API core: cursor-paginated gym, review, video, comment, "
            "exercise and search listings, with per-user token bucket limits on "
            "uploads and reports."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware
    app.middleware("http")(request_id_middleware)

    # Error envelope
    register_exception_handlers(app)

    # Register routes
    app.include_router(system.router)
    app.include_router(gyms.router)
    app.include_router(machines.router)
    app.include_router(videos.router)
    app.include_router(search.router)
    app.include_router(reports.router)
    app.include_router(exercises.router)

    # Collaborators for route access
    if upload_limiter is None or report_limiter is None:
        default_upload, default_report = _default_limiters()
        upload_limiter = upload_limiter or default_upload
        report_limiter = report_limiter or default_report

    if repositories is None:
        repositories = build_repositories()
    if object_storage is None:
        object_storage = build_object_storage()

    app.state.repositories = repositories
    app.state.object_storage = object_storage
    app.state.upload_limiter = upload_limiter
    app.state.report_limiter = report_limiter

    if not config.is_configured():
        logger.warning("config_incomplete", missing=config.get_missing_config())

    logger.info("app_created", version=__version__, storage_configured=object_storage is not None)
    return app
