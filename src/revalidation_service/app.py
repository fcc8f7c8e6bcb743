from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import redis.asyncio as aioredis
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from revalidation_service.api.middleware.request_context import RequestContextMiddleware
from revalidation_service.api.v1.routers import health, revalidation
from revalidation_service.application.exceptions import ForbiddenError, ValidationError
from revalidation_service.bootstrap import build_dispatcher, build_mapper
from revalidation_service.config import settings
from revalidation_service.infrastructure.db.session import engine
from revalidation_service.infrastructure.http.revalidation_client import RevalidationClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup / shutdown lifecycle."""
    app.state.redis = aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
    )
    app.state.revalidation_client = RevalidationClient(timeout=settings.REVALIDATE_TIMEOUT_SECONDS)
    app.state.mapper = build_mapper(settings)
    app.state.dispatcher = build_dispatcher(
        settings, app.state.redis, app.state.revalidation_client,
    )
    logger.info("Revalidation dispatcher ready")

    yield

    await app.state.revalidation_client.aclose()
    await app.state.redis.aclose()
    await engine.dispose()
    logger.info("Connections closed")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Frontend Revalidation Service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    _register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(revalidation.router)

    return app


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ForbiddenError)
    async def _forbidden(_req: Request, exc: ForbiddenError) -> JSONResponse:
        return JSONResponse(status_code=403, content={"detail": exc.detail})

    @app.exception_handler(ValidationError)
    async def _validation(_req: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"success": False, "message": exc.detail, "detail": exc.detail},
        )
