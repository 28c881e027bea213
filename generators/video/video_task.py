from concurrent.futures import CancelledError, Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Callable, Literal, Optional

VideoStatus = Literal["not_requested", "pending", "ready", "failed"]


@dataclass(frozen=True)
class VideoPoll:
    status: VideoStatus
    url: Optional[str] = None


class VideoTask:
    """
    Handle for a speculative video request.

    The handle is the only thing the background work writes to: the future
    resolves to a playable URL, or to None when generation failed or produced
    nothing. Callers observe it with poll(), wait() or add_done_callback().
    """

    def __init__(self, future: Optional["Future[Optional[str]]"] = None):
        self._future = future

    @classmethod
    def not_requested(cls) -> "VideoTask":
        return cls(None)

    @property
    def requested(self) -> bool:
        return self._future is not None

    @property
    def status(self) -> VideoStatus:
        future = self._future
        if future is None:
            return "not_requested"
        if not future.done():
            return "pending"
        if future.cancelled() or future.exception() is not None:
            return "failed"
        return "ready" if future.result() else "failed"

    @property
    def url(self) -> Optional[str]:
        if self.status != "ready":
            return None
        return self._future.result()

    def poll(self) -> VideoPoll:
        status = self.status
        return VideoPoll(status=status, url=self.url if status == "ready" else None)

    def wait(self, timeout: Optional[float] = None) -> VideoPoll:
        if self._future is not None:
            try:
                self._future.exception(timeout=timeout)
            except (CancelledError, FutureTimeoutError):
                pass
        return self.poll()

    def add_done_callback(self, callback: Callable[["VideoTask"], None]) -> None:
        if self._future is None:
            callback(self)
            return
        self._future.add_done_callback(lambda _future: callback(self))

    def cancel(self) -> bool:
        return self._future.cancel() if self._future is not None else False
