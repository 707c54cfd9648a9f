"""Results returned by the model gateway."""

from dataclasses import dataclass
from typing import List, Optional

GENERATED_IMAGE_MIME_TYPE = "image/png"


@dataclass
class EditResult:
    """Images returned by an edit call. Only the first one is used."""
    images: List[str]
    mime_type: str = GENERATED_IMAGE_MIME_TYPE

    def __post_init__(self):
        if not self.images:
            raise ValueError("EditResult requires at least one image")

    @property
    def primary(self) -> str:
        return self.images[0]


@dataclass
class AnalysisResult:
    """Free-text image analysis."""
    text: str


@dataclass
class SongResult:
    """Free-text song identification."""
    text: str
    audio_bytes: Optional[int] = None
