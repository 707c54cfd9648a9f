"""Audio capture and recording lifecycle."""

from .capture import AudioCapture
from .audio_pub import AudioPublisher
from .recorder import CaptureController, RECORDING_MIME_TYPE

__all__ = [
    'AudioCapture',
    'AudioPublisher',
    'CaptureController',
    'RECORDING_MIME_TYPE',
]
