import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from .video_client import VideoGenerationClient
from .video_task import VideoTask

logger = logging.getLogger("bedtale.generators.video")

_DESCRIPTION_EXCERPT_CHARS = 300


def build_scene_description(story_text: str, subject_name: str) -> str:
    opening = (story_text or "").strip().split("\n\n", 1)[0].strip()
    if len(opening) > _DESCRIPTION_EXCERPT_CHARS:
        opening = opening[:_DESCRIPTION_EXCERPT_CHARS].rsplit(" ", 1)[0] + "..."
    description = (
        f"A gentle animated story featuring {subject_name} with colorful characters "
        "in a magical setting. "
        f"Show {subject_name} interacting with cute animals in a beautiful, safe "
        "environment with soft colors and gentle movements."
    )
    if opening:
        description = f"{description} The story begins: \"{opening}\""
    return description


class SpeculativeVideoRequester:
    """
    Fires video generation requests without blocking the story response.

    Work runs on the requester's own thread pool; each request reports only
    through the VideoTask it returns.
    """

    def __init__(
        self,
        video_client: Optional[VideoGenerationClient] = None,
        duration_sec: int = 6,
        max_workers: int = 2,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.video_client = video_client
        self.duration_sec = duration_sec
        self._executor = executor
        self._max_workers = max(1, max_workers)

    def is_available(self) -> bool:
        return self.video_client is not None

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._max_workers,
                thread_name_prefix="bedtale-video",
            )
        return self._executor

    def request(self, story_text: str, subject_name: str) -> VideoTask:
        if not self.is_available():
            logger.info("VIDEO skipped subject=%s reason=unavailable", subject_name)
            return VideoTask.not_requested()

        description = build_scene_description(story_text, subject_name)
        future = self._get_executor().submit(self._run, description, subject_name)
        logger.info("VIDEO queued subject=%s duration=%ds", subject_name, self.duration_sec)
        return VideoTask(future)

    def _run(self, description: str, subject_name: str) -> Optional[str]:
        try:
            url = self.video_client.generate_video(
                description=description,
                subject_name=subject_name,
                duration_sec=self.duration_sec,
            )
        except Exception as error:
            logger.warning("VIDEO failed subject=%s error=%s", subject_name, error)
            return None
        logger.info("VIDEO ready subject=%s url=%s", subject_name, url)
        return url

    def shutdown(self, wait: bool = False) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait, cancel_futures=not wait)
            self._executor = None
