"""Services layer: one controller per tool plus the shared status tracker."""

from .status import RequestTracker
from .image_editor import ImageEditorController, QUICK_PROMPTS
from .image_analyzer import ImageAnalyzerController
from .song_identifier import SongIdentifierController

__all__ = [
    "RequestTracker",
    "ImageEditorController",
    "QUICK_PROMPTS",
    "ImageAnalyzerController",
    "SongIdentifierController",
]
