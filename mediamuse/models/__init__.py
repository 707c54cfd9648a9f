"""Data models for the MediaMuse application."""

from .media import MediaAsset, RecordingSession
from .results import EditResult, AnalysisResult, SongResult, GENERATED_IMAGE_MIME_TYPE
from .status import RequestStatus, AppMode
from .audio import AudioStats
from .events import AudioEvent

__all__ = [
    "MediaAsset",
    "RecordingSession",
    "EditResult",
    "AnalysisResult",
    "SongResult",
    "GENERATED_IMAGE_MIME_TYPE",
    "RequestStatus",
    "AppMode",
    "AudioStats",
    "AudioEvent",
]
