"""Request-scoped dependencies: container access and API key check."""

import hmac

from fastapi import Header, Request

from chain_metrics.dependency_container import ChainMetricsContainer
from chain_metrics.service import TpsService


class ApiError(Exception):
    """Error rendered as ``{"success": false, "error": message}``."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def get_container(request: Request) -> ChainMetricsContainer:
    return request.app.state.container


def get_service(request: Request) -> TpsService:
    return get_container(request).service


async def require_api_key(
    request: Request, x_api_key: str | None = Header(default=None)
) -> None:
    """Reject the request unless x-api-key matches the configured update key."""
    expected = get_container(request).state.api.update_api_key
    if not expected or not x_api_key:
        raise ApiError(401, "Unauthorized")
    if not hmac.compare_digest(x_api_key.encode(), expected.encode()):
        raise ApiError(401, "Unauthorized")
