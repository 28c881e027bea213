from __future__ import annotations

import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from app.api.stories import router as stories_router
from app.core.auth import build_error
from app.core.config import Settings, get_settings
from app.services.rate_limiter import InMemoryFixedWindowRateLimiter
from app.services.request_context import bind_request_id, current_request_id, log_event
from app.services.story_registry import StoryRegistry
from app.services.story_service import StoryService


def _json_safe_validation_errors(errors: Any) -> Any:
    return jsonable_encoder(
        errors,
        custom_encoder={
            BaseException: lambda value: str(value),
        },
    )


def _request_id_headers(request: Request) -> dict[str, str] | None:
    request_id = getattr(request.state, "request_id", None) or current_request_id()
    return {"X-Request-ID": request_id} if request_id else None


def create_app(
    settings: Settings | None = None,
    story_service: StoryService | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    story_service = story_service or StoryService.from_settings(settings)
    logging.basicConfig(level=logging.INFO)

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        log_event(
            event="app.start",
            story_service_configured=story_service.is_configured("gemini"),
            video_available=story_service.video_available(),
        )
        yield
        story_service.shutdown()

    application = FastAPI(
        title="BedTale FastAPI",
        version="0.1.0",
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.story_service = story_service
    application.state.story_registry = StoryRegistry(
        max_entries=settings.story_registry_max_entries,
    )
    application.state.rate_limiter = InMemoryFixedWindowRateLimiter()
    application.include_router(stories_router)

    @application.middleware("http")
    async def request_context_middleware(
        request: Request,
        call_next,
    ) -> Response:
        with bind_request_id(request.headers.get("X-Request-ID")) as request_id:
            request.state.request_id = request_id
            start = time.perf_counter()
            log_event(
                event="request.start",
                path=request.url.path,
                method=request.method,
            )

            response = None
            try:
                response = await call_next(request)
                return response
            finally:
                if response is not None:
                    response.headers["X-Request-ID"] = request_id
                log_event(
                    event="request.end",
                    path=request.url.path,
                    method=request.method,
                    status_code=response.status_code if response is not None else 500,
                    latency_ms=round((time.perf_counter() - start) * 1000, 2),
                )

    @application.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @application.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        detail = exc.detail
        if isinstance(detail, dict) and "error" in detail:
            payload: dict[str, Any] = detail
        else:
            payload = build_error(
                code=f"HTTP_{exc.status_code}",
                message=str(detail),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=payload,
            headers=_request_id_headers(request),
        )

    @application.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        safe_errors = _json_safe_validation_errors(exc.errors())
        return JSONResponse(
            status_code=422,
            content=build_error(
                code="VALIDATION_ERROR",
                message="request validation failed",
                detail={"errors": safe_errors},
            ),
            headers=_request_id_headers(request),
        )

    @application.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        log_event(
            event="request.unhandled_error",
            path=request.url.path,
            reason=repr(exc),
            level=logging.ERROR,
        )
        return JSONResponse(
            status_code=500,
            content=build_error(
                code="INTERNAL_SERVER_ERROR",
                message="internal server error",
            ),
            headers=_request_id_headers(request),
        )

    return application


def run() -> None:
    import uvicorn

    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host=os.getenv("BEDTALE_HOST", "127.0.0.1"),
        port=int(os.getenv("BEDTALE_PORT", "8000")),
    )
