from .video_task import VideoPoll, VideoStatus, VideoTask
from .video_client import VideoGenerationClient, VideoGenerationError
from .video_requester import SpeculativeVideoRequester

__all__ = [
    "SpeculativeVideoRequester",
    "VideoGenerationClient",
    "VideoGenerationError",
    "VideoPoll",
    "VideoStatus",
    "VideoTask",
]
