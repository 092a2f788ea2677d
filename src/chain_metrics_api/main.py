from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from chain_metrics import __version__
from chain_metrics.config import get_settings
from chain_metrics.dependency_container import ChainMetricsContainer
from chain_metrics.infrastructure.observability import get_api_logger, setup_logging
from chain_metrics_api.dependencies import ApiError
from chain_metrics_api.health import router as health_router
from chain_metrics_api.routes import router as tps_router

logger = get_api_logger("app")


def _default_container() -> ChainMetricsContainer:
    state = get_settings()
    setup_logging(level=state.logging.level, json_logs=state.logging.json_logs)
    return ChainMetricsContainer(state)


def create_app(
    container_factory: Callable[[], ChainMetricsContainer] = _default_container,
) -> FastAPI:
    """Build the API; the container is created and closed with the app lifespan."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        container = container_factory()
        await container.start()
        app.state.container = container
        logger.info("api_started", storage=container.state.storage.backend)
        try:
            yield
        finally:
            await container.close()
            logger.info("api_stopped")

    app = FastAPI(title="Chain Metrics API", version=__version__, lifespan=lifespan)
    app.include_router(health_router, prefix="")  # /health directly
    app.include_router(tps_router, prefix="")

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.message},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("request_failed", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=500, content={"success": False, "error": str(exc)}
        )

    @app.get("/")
    async def root():
        return {"message": "Chain Metrics API is running"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.api.host, port=settings.api.port)
