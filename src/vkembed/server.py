"""
HTTP transport for vkembed.

Single stateless endpoint: POST ``{"videoUrl": ...}`` and receive an embed
URL or a JSON error body. Every response carries permissive CORS headers
and preflight requests are answered before any routing.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response

from vkembed.config import defaults
from vkembed.config.loader import ServiceConfig, get_config
from vkembed.exceptions import InternalServiceError, MissingInputError, VkEmbedError
from vkembed.operations.resolve import resolve_embed
from vkembed.providers.base import MetadataProvider
from vkembed.providers.vk import VkVideoProvider

logger = logging.getLogger(__name__)

EMBED_PATHS = ("/", "/vk-video-api")


def error_response(error: VkEmbedError) -> JSONResponse:
    return JSONResponse(error.to_dict(), status_code=error.status_code)


async def read_video_url(request: Request) -> str:
    """Extract videoUrl from the JSON request body.

    Raises:
        MissingInputError: If the body is not an object or videoUrl is
            missing, empty or not a string.
        ValueError: If the body is not valid JSON.
    """
    payload: Any = await request.json()
    if not isinstance(payload, dict):
        raise MissingInputError()
    video_url = payload.get("videoUrl")
    if not video_url or not isinstance(video_url, str):
        raise MissingInputError()
    return video_url


def create_app(
    config: ServiceConfig | None = None,
    provider: MetadataProvider | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Configuration is resolved once here. When no provider is passed and the
    access token is configured, a VkVideoProvider is built from it; without
    a token the app still starts and answers lookups with a configuration
    error.

    Args:
        config: Resolved configuration. Defaults to get_config().
        provider: Metadata provider override (used by tests).
    """
    config = config or get_config()
    if provider is None and config.is_configured:
        provider = VkVideoProvider.from_config(config)
    if provider is None:
        logger.error("VK API not configured; set VK_SERVICE_ACCESS_KEY")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if provider is not None:
            await provider.aclose()

    app = FastAPI(title="vkembed", lifespan=lifespan)
    app.state.config = config
    app.state.provider = provider

    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=defaults.CORS_HEADERS)
        response = await call_next(request)
        response.headers.update(defaults.CORS_HEADERS)
        return response

    @app.exception_handler(VkEmbedError)
    async def handle_vkembed_error(request: Request, exc: VkEmbedError) -> JSONResponse:
        return error_response(exc)

    async def embed(request: Request) -> JSONResponse:
        try:
            video_url = await read_video_url(request)
            result = await resolve_embed(video_url, provider)
        except VkEmbedError:
            raise
        except Exception as e:
            logger.exception("Error processing VK video")
            raise InternalServiceError(str(e)) from e
        return JSONResponse(result.to_response())

    for path in EMBED_PATHS:
        app.add_api_route(path, embed, methods=["POST"])

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"status": "ok", "configured": provider is not None}

    return app


def serve(
    config: ServiceConfig | None = None,
    *,
    host: str | None = None,
    port: int | None = None,
    log_level: str = "info",
) -> None:
    """Run the service under uvicorn."""
    config = config or get_config()
    app = create_app(config)
    uvicorn.run(
        app,
        host=host or config.host,
        port=port or config.port,
        log_level=log_level,
    )
