"""Media-related data models."""

import base64 as b64
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class MediaAsset:
    """Binary payload plus mime type, base64-encoded for transmission."""
    mime_type: str
    binary_data: bytes = field(repr=False)
    base64: str = field(repr=False)

    @property
    def size_bytes(self) -> int:
        return len(self.binary_data)

    def decode(self) -> bytes:
        """Decode the base64 payload back to raw bytes."""
        return b64.b64decode(self.base64)


@dataclass
class RecordingSession:
    """A single microphone recording, alive from start to finalization."""
    is_active: bool = True
    accumulated_chunks: List[bytes] = field(default_factory=list)
    last_sequence: int = 0

    @property
    def total_bytes(self) -> int:
        return sum(len(chunk) for chunk in self.accumulated_chunks)
