from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime, timezone

from generators.story.story_model import StoryParameters, StoryResult

from app.services.storage import make_story_id


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class StoryEntry:
    id: str
    parameters: StoryParameters
    result: StoryResult
    created_at: datetime = field(default_factory=_utc_now)


class StoryRegistry:
    """
    Holds the stories a running server has handed out, in memory only.

    The oldest entry is evicted once max_entries is reached. Dropping an entry
    only forgets it; a video task that is still running finishes into its own
    handle and is never written back here.
    """

    def __init__(self, max_entries: int = 200) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1.")
        self.max_entries = max_entries
        self._lock = threading.Lock()
        self._entries: OrderedDict[str, StoryEntry] = OrderedDict()

    def add(self, parameters: StoryParameters, result: StoryResult) -> StoryEntry:
        entry = StoryEntry(
            id=make_story_id(child_name=parameters.child_name, theme=parameters.theme),
            parameters=parameters,
            result=result,
        )
        with self._lock:
            self._entries[entry.id] = entry
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
        return entry

    def get(self, story_id: str) -> StoryEntry | None:
        with self._lock:
            return self._entries.get(story_id)

    def discard(self, story_id: str) -> bool:
        with self._lock:
            entry = self._entries.pop(story_id, None)
        if entry is None:
            return False
        entry.result.video.cancel()
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
