"""Image editing and merging tool."""

import logging
from pathlib import Path
from typing import Optional, Union

from ..errors import GenerationError, MediaMuseError
from ..gateway.model_gateway import ModelGateway
from ..media.encoder import decode_base64, encode_file
from ..models.results import EditResult
from ..models.status import RequestStatus
from .status import RequestTracker

logger = logging.getLogger(__name__)


QUICK_PROMPTS = [
    "Cyberpunk style",
    "Remove background",
    "Oil painting",
    "Add dramatic lighting",
    "Turn into anime",
]


class ImageEditorController:
    """Holds the base image, optional merge image and prompt for the editor."""

    def __init__(self, gateway: ModelGateway):
        self.gateway = gateway
        self.tracker = RequestTracker("image_editor")
        self.base_path: Optional[Path] = None
        self.merge_path: Optional[Path] = None
        self.prompt = ""

    @property
    def status(self) -> RequestStatus:
        return self.tracker.status

    @property
    def result(self) -> Optional[EditResult]:
        return self.tracker.result

    def select_base(self, path: Union[str, Path]) -> None:
        """Choose the base image; any previous result is discarded."""
        self.base_path = Path(path)
        self.tracker.reset()

    def select_merge(self, path: Union[str, Path]) -> None:
        """Choose the optional second image to combine with the base."""
        self.merge_path = Path(path)
        self.tracker.reset()

    def clear_base(self) -> None:
        self.base_path = None
        self.tracker.reset()

    def clear_merge(self) -> None:
        self.merge_path = None

    def set_prompt(self, prompt: str) -> None:
        self.prompt = prompt

    def apply_quick_prompt(self, prompt: str) -> None:
        if prompt not in QUICK_PROMPTS:
            raise ValueError(f"Unknown quick prompt: {prompt}")
        self.prompt = prompt

    def can_generate(self) -> bool:
        return self.base_path is not None and bool(self.prompt.strip()) and not self.tracker.is_loading

    async def generate(self) -> RequestStatus:
        """Send the images and prompt to the model.

        Ignored (no transition, no call) without a base image, with a blank
        prompt, or while a request is already in flight.
        """
        if not self.can_generate():
            logger.debug("Generate ignored: missing input or request in flight")
            return self.status

        token = self.tracker.begin()
        try:
            primary = await encode_file(self.base_path)
            secondary = await encode_file(self.merge_path) if self.merge_path else None
            images = await self.gateway.edit_image(primary, self.prompt, secondary)
            if not images:
                raise GenerationError("No image returned")
            result = EditResult(images=images)
        except MediaMuseError as e:
            logger.error(f"Image edit failed: {e}")
            self.tracker.fail(token, e.user_message)
            return self.status
        except Exception:
            logger.exception("Unexpected failure during image edit")
            self.tracker.fail(token, MediaMuseError.user_message)
            raise

        self.tracker.succeed(token, result)
        return self.status

    def save_result(self, path: Union[str, Path]) -> Path:
        """Write the generated image to disk."""
        if self.result is None:
            raise ValueError("No generated image to save")
        path = Path(path)
        path.write_bytes(decode_base64(self.result.primary))
        logger.info(f"Saved generated image to {path}")
        return path
