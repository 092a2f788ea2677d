"""
TPS routes.

Keyed update routes (scheduler and operators) and read routes consumed by the
dashboard. Read failures surface as 500 through the app's error handler.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from chain_metrics.common.utils.date_utils import to_iso_z, unix_now
from chain_metrics.infrastructure.observability import get_api_logger
from chain_metrics.service import TpsService
from chain_metrics_api.dependencies import get_service, require_api_key

logger = get_api_logger("routes")

router = APIRouter()


@router.post(
    "/update/chain/{chain_id}/tps", dependencies=[Depends(require_api_key)]
)
async def update_chain_tps(
    chain_id: str, service: TpsService = Depends(get_service)
) -> JSONResponse:
    """Refresh one chain now and return its newest reading."""
    result = await service.refresh_chain(chain_id)

    if result["outcome"] == "failed":
        logger.error("chain_update_failed", chain_id=chain_id, error=result["error"])
        return JSONResponse(
            status_code=502,
            content={
                "success": False,
                "chainId": chain_id,
                "outcome": result["outcome"],
                "error": result["error"],
            },
        )

    latest = result["latest"]
    return JSONResponse(
        content={
            "success": True,
            "chainId": chain_id,
            "outcome": result["outcome"],
            "latestTps": latest.to_point() if latest else None,
        }
    )


@router.post("/update/batch", dependencies=[Depends(require_api_key)])
async def update_batch(service: TpsService = Depends(get_service)) -> JSONResponse:
    """Accept a catalog-wide refresh; it keeps running after the response."""
    handle = service.start_batch_refresh()
    logger.info("batch_update_started", batch_id=handle.batch_id)
    return JSONResponse(
        status_code=202,
        content={
            "success": True,
            "message": "Update process started",
            "batchId": handle.batch_id,
            "timestamp": to_iso_z(unix_now()),
        },
    )


@router.get("/chains/{chain_id}/tps/history")
async def chain_tps_history(
    chain_id: str,
    days: int = Query(30, ge=1, le=365),
    service: TpsService = Depends(get_service),
) -> dict[str, Any]:
    records = await service.chain_history(chain_id, days)
    return {"success": True, "data": [record.to_point() for record in records]}


@router.get("/chains/{chain_id}/tps/latest")
async def chain_tps_latest(
    chain_id: str, service: TpsService = Depends(get_service)
) -> dict[str, Any]:
    record = await service.chain_latest(chain_id)
    return {"success": True, "data": record.to_point() if record else None}


@router.get("/tps/network/latest")
async def network_tps_latest(
    service: TpsService = Depends(get_service),
) -> dict[str, Any]:
    snapshot = await service.network_snapshot()
    return {"success": True, "data": snapshot.model_dump(by_alias=True)}


@router.get("/tps/network/history")
async def network_tps_history(
    days: int = Query(7, ge=1, le=365),
    service: TpsService = Depends(get_service),
) -> dict[str, Any]:
    points = await service.network_history(days)
    return {
        "success": True,
        "data": [point.model_dump(by_alias=True) for point in points],
    }
