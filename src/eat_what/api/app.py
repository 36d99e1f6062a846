"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from eat_what.api.service_worker import router as service_worker_router
from eat_what.app_logging import configure_logging
from eat_what.containers import AppContainer
from eat_what.domain.errors import AnalysisError

ANALYZE_PATH = "/api/call-ai"

_INTERNAL_ERROR_MESSAGE = "服务器内部错误"


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)
    cors_headers = _cors_headers(container.settings.cors_allow_origin)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(service_worker_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.options(ANALYZE_PATH)
    async def analyze_preflight() -> Response:
        """Answer CORS preflight requests."""
        return Response(status_code=200, headers=cors_headers)

    @app.post(ANALYZE_PATH)
    async def analyze(request: Request) -> JSONResponse:
        """Identify foods in text or an image, or revise a previous result."""
        state_container: AppContainer = request.app.state.container
        body = await request.body()
        try:
            result = await state_container.analysis_service.analyze(body)
        except AnalysisError as exc:
            logger.warning("Analyze request failed: %s", type(exc).__name__)
            return _error_response(
                state_container, exc, exc.user_message, cors_headers
            )
        except Exception as exc:
            logger.exception("Unexpected error while analyzing request")
            return _error_response(
                state_container, exc, _INTERNAL_ERROR_MESSAGE, cors_headers
            )
        return JSONResponse(result.model_dump(), headers=cors_headers)

    @app.api_route(ANALYZE_PATH, methods=["GET", "HEAD", "PUT", "PATCH", "DELETE"])
    async def analyze_method_not_allowed() -> JSONResponse:
        """Reject every method other than POST and OPTIONS."""
        return JSONResponse(
            {"error": "Method not allowed"}, status_code=405, headers=cors_headers
        )

    return app


def _cors_headers(allow_origin: str) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Headers": "Content-Type",
        "Access-Control-Allow-Methods": "POST, OPTIONS",
    }


def _error_response(
    state_container: AppContainer,
    exc: Exception,
    message: str,
    headers: dict[str, str],
) -> JSONResponse:
    """Return the ``{"error": ...}`` body, with debug detail when running locally."""
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            message = f"{message} (debug: {detail})"
    return JSONResponse({"error": message}, status_code=500, headers=headers)
