"""Song identification from a microphone recording."""

import logging
from functools import partial
from typing import Optional

from ..audio.recorder import CaptureController
from ..errors import MediaMuseError
from ..gateway.model_gateway import ModelGateway
from ..models.media import MediaAsset
from ..models.results import SongResult
from ..models.status import RequestStatus
from .status import RequestTracker

logger = logging.getLogger(__name__)


class SongIdentifierController:
    """Records from the microphone and identifies the song once stopped.

    Stopping and identifying are one step: the capture controller calls back
    into ``_identify`` as soon as the recording is finalized.
    """

    def __init__(self, gateway: ModelGateway, capture: CaptureController):
        self.gateway = gateway
        self.capture = capture
        self.tracker = RequestTracker("song_identifier")

    @property
    def status(self) -> RequestStatus:
        return self.tracker.status

    @property
    def result(self) -> Optional[SongResult]:
        return self.tracker.result

    @property
    def is_recording(self) -> bool:
        return self.capture.is_recording

    async def start_recording(self) -> None:
        """Start a new recording, discarding the previous result.

        Raises:
            MicrophonePermissionError: If the microphone is refused
        """
        self.tracker.reset()
        await self.capture.start_recording()

    async def stop_recording(self) -> RequestStatus:
        """Stop recording and identify the clip. No-op while not recording."""
        if not self.capture.is_recording:
            return self.status

        token = self.tracker.begin()
        # Bound per stop so a late identification keeps its own token
        self.capture.on_recording_complete = partial(self._identify, token)
        try:
            await self.capture.stop_recording()
        except MediaMuseError as e:
            logger.error(f"Finalizing recording failed: {e}")
            self.tracker.fail(token, e.user_message)
        except Exception:
            logger.exception("Unexpected failure while stopping the recording")
            self.tracker.fail(token, MediaMuseError.user_message)
            raise
        return self.status

    async def _identify(self, token: int, asset: MediaAsset) -> None:
        try:
            text = await self.gateway.identify_song(asset)
        except MediaMuseError as e:
            logger.error(f"Song identification failed: {e}")
            self.tracker.fail(token, e.user_message)
            return
        self.tracker.succeed(token, SongResult(text=text, audio_bytes=asset.size_bytes))

    def close(self) -> None:
        """Release the microphone when the tool goes away."""
        self.capture.close()
