"""Request status and application mode enums."""

from enum import Enum


class RequestStatus(Enum):
    """Status of a single tool invocation."""
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class AppMode(Enum):
    """Top-level screens of the application."""
    LANDING = "landing"
    SONG_SEARCH = "song_search"
    IMAGE_EDITOR = "image_editor"
    IMAGE_ANALYZER = "image_analyzer"
