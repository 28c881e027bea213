from __future__ import annotations

import re
import uuid
from datetime import datetime


def slugify(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", (text or "").lower()).strip("-")


def make_story_id(child_name: str, theme: str = "", now: datetime | None = None) -> str:
    timestamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
    source = "-".join(part for part in [child_name.strip(), theme.strip()] if part)
    slug = slugify(source) or "story"
    return f"{timestamp}_story_{slug}_{uuid.uuid4().hex[:8]}"


def build_download_filename(child_name: str, created_at: datetime) -> str:
    safe_name = slugify(child_name) or "baby"
    return f"{safe_name}-story-{created_at.strftime('%Y-%m-%d')}.txt"
