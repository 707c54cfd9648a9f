"""Event models for audio fragment publishing."""

from dataclasses import dataclass


@dataclass
class AudioEvent:
    """One audio fragment as read from the device."""
    audio_data: bytes
    sequence_number: int  # 1-based within a recording
    final: bool = False  # True for the last fragment of a recording
