"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from skillswap.admin.router import router as admin_router
from skillswap.auth.router import router as auth_router
from skillswap.config import get_settings
from skillswap.health.router import router as health_router
from skillswap.messages.router import router as messages_router
from skillswap.middleware import setup_middleware
from skillswap.redis_client import close_redis, init_redis
from skillswap.seed import seed_admin
from skillswap.skills.router import router as skills_router
from skillswap.store import close_store, init_store
from skillswap.swaps.router import router as swaps_router
from skillswap.users.router import router as users_router


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    store = await init_store(settings)
    if settings.redis_url:
        await init_redis(settings.redis_url)

    try:
        await seed_admin(store, settings)
    except Exception:
        logging.getLogger(__name__).warning("Admin seeding failed", exc_info=True)

    yield

    await close_store()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="SkillSwap API",
        description="Backend API for SkillSwap, a skill-exchange marketplace",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(auth_router)
    app.include_router(users_router)
    app.include_router(skills_router)
    app.include_router(swaps_router)
    app.include_router(messages_router)
    app.include_router(admin_router)

    # The directory appears with the first upload.
    app.mount("/uploads", StaticFiles(directory=Path(settings.upload_dir), check_dir=False), name="uploads")

    return app


app = create_app()
