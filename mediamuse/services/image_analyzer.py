"""Detailed image analysis tool."""

import logging
from pathlib import Path
from typing import Optional, Union

from ..errors import MediaMuseError
from ..gateway.model_gateway import ModelGateway
from ..media.encoder import encode_file
from ..models.results import AnalysisResult
from ..models.status import RequestStatus
from .status import RequestTracker

logger = logging.getLogger(__name__)


class ImageAnalyzerController:

    def __init__(self, gateway: ModelGateway):
        self.gateway = gateway
        self.tracker = RequestTracker("image_analyzer")
        self.image_path: Optional[Path] = None

    @property
    def status(self) -> RequestStatus:
        return self.tracker.status

    @property
    def result(self) -> Optional[AnalysisResult]:
        return self.tracker.result

    def select_image(self, path: Union[str, Path]) -> None:
        self.image_path = Path(path)
        self.tracker.reset()

    def clear_image(self) -> None:
        self.image_path = None
        self.tracker.reset()

    async def analyze(self) -> RequestStatus:
        """Analyze the selected image; ignored without one or while loading."""
        if self.image_path is None or self.tracker.is_loading:
            return self.status

        token = self.tracker.begin()
        try:
            asset = await encode_file(self.image_path)
            text = await self.gateway.analyze_image(asset)
        except MediaMuseError as e:
            logger.error(f"Image analysis failed: {e}")
            self.tracker.fail(token, e.user_message)
            return self.status
        except Exception:
            logger.exception("Unexpected failure during image analysis")
            self.tracker.fail(token, MediaMuseError.user_message)
            raise

        self.tracker.succeed(token, AnalysisResult(text=text))
        return self.status
