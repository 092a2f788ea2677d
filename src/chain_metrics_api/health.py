import time
from typing import Any

from fastapi import APIRouter, Depends, Request

from chain_metrics.infrastructure.observability import get_api_logger
from chain_metrics_api.dependencies import get_container, require_api_key

logger = get_api_logger("health")

router = APIRouter()


async def check_database(request: Request) -> bool:
    """Check series store connectivity."""
    try:
        return await get_container(request).store.ping()
    except Exception as e:
        logger.error("store_ping_failed", error=str(e))
        return False


@router.get("/health")
async def health_check(request: Request) -> dict[str, Any]:
    """Store connectivity; degraded when the database is unreachable."""
    container = get_container(request)
    db_connected = await check_database(request)
    if not db_connected:
        logger.warning("health_degraded", storage=container.state.storage.backend)

    return {
        "success": True,
        "status": "ok" if db_connected else "degraded",
        "timestamp": int(time.time() * 1000),
        "metrics": {
            "dbConnected": db_connected,
            "storage": container.state.storage.backend,
            "environment": container.state.env,
        },
    }


@router.get("/ready")
async def readiness_check() -> dict[str, Any]:
    """Readiness check for Kubernetes."""
    return {"status": "ready"}


@router.get("/test", dependencies=[Depends(require_api_key)])
async def test_endpoint() -> dict[str, Any]:
    """Keyed liveness probe used by the scheduler before triggering a batch."""
    return {"success": True, "timestamp": int(time.time() * 1000)}
