from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _parse_int_env(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if value < 1:
        return default
    return value


def _parse_float_env(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    if value < 0:
        return default
    return value


def _parse_bool_env(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    if raw in {"1", "true", "yes", "on"}:
        return True
    if raw in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_csv_env(name: str, default: list[str]) -> tuple[str, ...]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return tuple(default)
    values = tuple(item.strip() for item in raw.split(",") if item.strip())
    return values if values else tuple(default)


@dataclass(frozen=True)
class Settings:
    api_keys: tuple[str, ...] = ()
    gemini_api_key: str = ""
    video_api_key: str = ""
    video_enabled: bool = True
    story_model: str = "gemini-2.5-flash"
    video_model: str = "veo-2.0-generate-001"
    max_attempts: int = 3
    backoff_base_sec: float = 1.0
    video_duration_sec: int = 6
    video_poll_interval_sec: float = 10.0
    video_max_wait_sec: float = 300.0
    video_workers: int = 2
    rate_limit_post_stories_per_min: int = 5
    child_name_max_len: int = 40
    story_registry_max_entries: int = 200

    @property
    def video_configured(self) -> bool:
        return self.video_enabled and bool(self.video_api_key)


def get_settings() -> Settings:
    gemini_api_key = (os.getenv("GEMINI_API_KEY") or "").strip()
    video_api_key = (os.getenv("GEMINI_VIDEO_API_KEY") or "").strip() or gemini_api_key
    return Settings(
        api_keys=_parse_csv_env("BEDTALE_API_KEY", default=[]),
        gemini_api_key=gemini_api_key,
        video_api_key=video_api_key,
        video_enabled=_parse_bool_env("BEDTALE_VIDEO_ENABLED", default=True),
        story_model=(os.getenv("BEDTALE_STORY_MODEL") or "").strip() or "gemini-2.5-flash",
        video_model=(os.getenv("BEDTALE_VIDEO_MODEL") or "").strip() or "veo-2.0-generate-001",
        max_attempts=_parse_int_env("BEDTALE_MAX_ATTEMPTS", default=3),
        backoff_base_sec=_parse_float_env("BEDTALE_BACKOFF_BASE_SEC", default=1.0),
        video_duration_sec=_parse_int_env("BEDTALE_VIDEO_DURATION_SEC", default=6),
        video_poll_interval_sec=_parse_float_env(
            "BEDTALE_VIDEO_POLL_INTERVAL_SEC",
            default=10.0,
        )
        or 10.0,
        video_max_wait_sec=_parse_float_env("BEDTALE_VIDEO_MAX_WAIT_SEC", default=300.0),
        video_workers=_parse_int_env("BEDTALE_VIDEO_WORKERS", default=2),
        rate_limit_post_stories_per_min=_parse_int_env(
            "BEDTALE_RATE_LIMIT_POST_STORIES_PER_MIN",
            default=5,
        ),
        child_name_max_len=_parse_int_env("BEDTALE_CHILD_NAME_MAX_LEN", default=40),
        story_registry_max_entries=_parse_int_env(
            "BEDTALE_STORY_REGISTRY_MAX_ENTRIES",
            default=200,
        ),
    )
