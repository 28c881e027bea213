from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.responses import PlainTextResponse

from generators.story.errors import (
    GENERIC_FAILURE_MESSAGE,
    StoryGenerationError,
    StoryServiceNotConfiguredError,
)
from generators.video.video_task import VideoTask

from app.core.auth import api_error, require_api_key
from app.core.config import Settings
from app.schemas.story import (
    CapabilitiesResponse,
    ErrorResponse,
    StoryCreateRequest,
    StoryResponse,
    VideoStatusResponse,
)
from app.services.rate_limiter import InMemoryFixedWindowRateLimiter
from app.services.request_context import current_request_id, log_event
from app.services.storage import build_download_filename
from app.services.story_registry import StoryEntry, StoryRegistry
from app.services.story_service import StoryService

router = APIRouter(
    prefix="/api/stories",
    tags=["stories"],
    dependencies=[Depends(require_api_key)],
)

NOT_CONFIGURED_MESSAGE = "Story generation is not available right now. Please try again later."


def get_settings_dependency(request: Request) -> Settings:
    return request.app.state.settings


def get_story_service(request: Request) -> StoryService:
    return request.app.state.story_service


def get_story_registry(request: Request) -> StoryRegistry:
    return request.app.state.story_registry


def get_rate_limiter(request: Request) -> InMemoryFixedWindowRateLimiter:
    return request.app.state.rate_limiter


def _story_not_found(story_id: str) -> HTTPException:
    return api_error(
        status.HTTP_404_NOT_FOUND,
        "STORY_NOT_FOUND",
        "story not found",
        detail={"id": story_id},
    )


def _check_child_name_length(child_name: str, max_len: int) -> None:
    if len(child_name) <= max_len:
        return
    raise api_error(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "request validation failed",
        detail={
            "errors": [
                {
                    "loc": ["body", "child_name"],
                    "msg": f"child_name must be <= {max_len} characters",
                    "type": "value_error",
                }
            ]
        },
    )


def _load_entry(registry: StoryRegistry, story_id: str) -> StoryEntry:
    entry = registry.get(story_id)
    if entry is None:
        raise _story_not_found(story_id)
    return entry


def _to_story_response(entry: StoryEntry) -> StoryResponse:
    poll = entry.result.video.poll()
    return StoryResponse(
        id=entry.id,
        source=entry.result.source,
        child_name=entry.parameters.child_name,
        text=entry.result.text,
        paragraphs=[part for part in entry.result.text.split("\n\n") if part.strip()],
        has_video=entry.result.has_video,
        video_status=poll.status,
        video_url=poll.url,
        created_at=entry.created_at.isoformat(timespec="seconds"),
        video_status_url=f"/api/stories/{entry.id}/video",
        download_url=f"/api/stories/{entry.id}/download",
    )


def _watch_video(story_id: str, video: VideoTask, request_id: str | None) -> None:
    if not video.requested:
        return

    def on_done(task: VideoTask) -> None:
        poll = task.poll()
        log_event(
            event="story.video.finished",
            request_id=request_id,
            story_id=story_id,
            status=poll.status,
            level=logging.INFO if poll.status == "ready" else logging.WARNING,
        )

    video.add_done_callback(on_done)


@router.get("/capabilities", response_model=CapabilitiesResponse)
def get_capabilities(
    story_service: StoryService = Depends(get_story_service),
) -> CapabilitiesResponse:
    return CapabilitiesResponse(
        story_service_configured=story_service.is_configured("gemini"),
        video_available=story_service.video_available(),
    )


@router.post(
    "/",
    response_model=StoryResponse,
    responses={
        401: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
    status_code=status.HTTP_201_CREATED,
)
def create_story(
    request: StoryCreateRequest,
    api_key: str = Depends(require_api_key),
    settings: Settings = Depends(get_settings_dependency),
    story_service: StoryService = Depends(get_story_service),
    registry: StoryRegistry = Depends(get_story_registry),
    rate_limiter: InMemoryFixedWindowRateLimiter = Depends(get_rate_limiter),
) -> StoryResponse:
    _check_child_name_length(request.child_name, settings.child_name_max_len)

    limit_per_min = settings.rate_limit_post_stories_per_min
    if not rate_limiter.is_allowed(key=api_key, limit_per_min=limit_per_min):
        raise api_error(
            status.HTTP_429_TOO_MANY_REQUESTS,
            "RATE_LIMIT_EXCEEDED",
            "rate limit exceeded",
            detail={"limit_per_min": limit_per_min},
        )

    source = request.generator
    not_configured = api_error(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "STORY_SERVICE_NOT_CONFIGURED",
        NOT_CONFIGURED_MESSAGE,
    )
    if not story_service.is_configured(source):
        raise not_configured

    parameters = request.to_parameters()
    log_event(event="story.generate.start", source=source, theme=parameters.theme)
    try:
        result = story_service.generate_story(parameters, source=source)
    except StoryServiceNotConfiguredError:
        raise not_configured from None
    except StoryGenerationError as error:
        log_event(
            event="story.generate.failed",
            source=source,
            reason=str(error.__cause__ or error),
            level=logging.ERROR,
        )
        raise api_error(
            status.HTTP_502_BAD_GATEWAY,
            "GENERATION_FAILED",
            GENERIC_FAILURE_MESSAGE,
        ) from None

    entry = registry.add(parameters=parameters, result=result)
    _watch_video(entry.id, result.video, current_request_id())
    log_event(
        event="story.generate.completed",
        story_id=entry.id,
        source=source,
        has_video=result.has_video,
    )
    return _to_story_response(entry)


@router.get(
    "/{story_id}",
    response_model=StoryResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def get_story(
    story_id: str,
    registry: StoryRegistry = Depends(get_story_registry),
) -> StoryResponse:
    return _to_story_response(_load_entry(registry, story_id))


@router.get(
    "/{story_id}/video",
    response_model=VideoStatusResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def get_story_video(
    story_id: str,
    registry: StoryRegistry = Depends(get_story_registry),
) -> VideoStatusResponse:
    entry = _load_entry(registry, story_id)
    poll = entry.result.video.poll()
    return VideoStatusResponse(id=entry.id, status=poll.status, video_url=poll.url)


@router.get(
    "/{story_id}/download",
    response_class=PlainTextResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def download_story(
    story_id: str,
    registry: StoryRegistry = Depends(get_story_registry),
) -> PlainTextResponse:
    entry = _load_entry(registry, story_id)
    filename = build_download_filename(entry.parameters.child_name, entry.created_at)
    return PlainTextResponse(
        content=entry.result.text,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete(
    "/{story_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def discard_story(
    story_id: str,
    registry: StoryRegistry = Depends(get_story_registry),
) -> Response:
    if not registry.discard(story_id):
        raise _story_not_found(story_id)
    log_event(event="story.discarded", story_id=story_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
