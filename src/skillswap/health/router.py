"""Health, readiness, and version endpoints."""

from fastapi import APIRouter, Depends

from skillswap.config import get_settings
from skillswap.dependencies import get_record_store
from skillswap.redis_client import get_redis, redis_enabled
from skillswap.store import RecordStore

router = APIRouter(prefix="/api")


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe: returns 200 if the process is alive."""
    return {"status": "OK", "message": "SkillSwap API is running"}


@router.get("/ready")
async def readiness(
    store: RecordStore = Depends(get_record_store),  # noqa: B008
) -> dict[str, object]:
    """Readiness probe: checks the record store and, when configured, Redis."""
    checks: dict[str, object] = {}

    try:
        await store.ping()
        checks["store"] = "ok"
    except Exception as exc:
        checks["store"] = f"error: {exc}"

    if redis_enabled():
        try:
            await get_redis().ping()
            checks["redis"] = "ok"
        except Exception as exc:
            checks["redis"] = f"error: {exc}"
    else:
        checks["redis"] = "disabled"

    all_ok = all(v in ("ok", "disabled") for v in checks.values())
    return {"status": "ready" if all_ok else "degraded", "checks": checks}


@router.get("/version")
async def version() -> dict[str, str]:
    """Return API version, environment and store backend."""
    settings = get_settings()
    return {
        "version": settings.app_version,
        "environment": settings.environment,
        "store_backend": settings.store_backend,
    }
