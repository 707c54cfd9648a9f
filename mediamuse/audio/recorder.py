"""Recording lifecycle: start, accumulate fragments, finalize into one asset."""

import io
import wave
import asyncio
import logging
import threading
from typing import Awaitable, Callable, Optional

import pyaudio
from pubsub import pub

from ..media.encoder import encode_bytes
from ..models.events import AudioEvent
from ..models.media import MediaAsset, RecordingSession
from .audio_pub import AudioPublisher
from .capture import AudioCapture

logger = logging.getLogger(__name__)


RECORDING_MIME_TYPE = "audio/wav"

RecordingCallback = Callable[[MediaAsset], Awaitable[None]]


class CaptureController:
    """Two-state (Idle/Recording) controller around the microphone.

    Fragments arrive on a pypubsub topic and are appended to the current
    RecordingSession in arrival order. Stopping finalizes the session into a
    single WAV asset and hands it to ``on_recording_complete``.
    """

    def __init__(self,
                 on_recording_complete: Optional[RecordingCallback] = None,
                 sample_rate: int = 16000,
                 chunk_size: int = 1024,
                 channels: int = 1,
                 topic: str = "audio.fragment"):
        self.on_recording_complete = on_recording_complete
        self.topic = topic
        self.publisher = AudioPublisher(topic)
        self.capture = AudioCapture(
            callback=self.publisher.publish_audio_event,
            sample_rate=sample_rate,
            chunk_size=chunk_size,
            channels=channels,
        )

        self.session: Optional[RecordingSession] = None
        self.lock = threading.Lock()
        # Serializes device start/stop so a new start waits for a pending stop
        self.device_lock = asyncio.Lock()

        pub.subscribe(self._on_audio_event, topic)
        logger.info(f"CaptureController initialized - subscribed to {topic}")

    @property
    def is_recording(self) -> bool:
        return self.session is not None and self.session.is_active

    def _on_audio_event(self, event: AudioEvent) -> None:
        """Append a fragment to the active session (reader thread)."""
        with self.lock:
            session = self.session
            if session is None:
                return
            if event.sequence_number <= session.last_sequence:
                logger.warning(f"Out-of-order fragment {event.sequence_number} "
                               f"after {session.last_sequence}")
            session.last_sequence = event.sequence_number
            if event.audio_data:
                session.accumulated_chunks.append(event.audio_data)
        if event.final:
            logger.debug(f"Final fragment {event.sequence_number} received")

    async def start_recording(self) -> None:
        """Open the microphone and begin a new session.

        Starting while already recording does nothing. A start issued while a
        stop is still releasing the device waits for that stop to finish.

        Raises:
            MicrophonePermissionError: If the device is refused; stays Idle
        """
        async with self.device_lock:
            if self.is_recording:
                logger.warning("Recording already in progress")
                return

            session = RecordingSession()
            with self.lock:
                self.session = session
            try:
                await asyncio.to_thread(self.capture.start_recording)
            except Exception:
                with self.lock:
                    if self.session is session:
                        self.session = None
                raise
        logger.info("Recording session started")

    async def stop_recording(self) -> Optional[MediaAsset]:
        """Stop, release the microphone and finalize the recording.

        Returns None when called while idle. Otherwise returns the finalized
        asset after ``on_recording_complete`` has run.
        """
        callback = self.on_recording_complete
        async with self.device_lock:
            session = self.session
            if session is None or not session.is_active:
                logger.debug("stop_recording called while idle")
                return None
            session.is_active = False

            try:
                await asyncio.to_thread(self.capture.stop_recording)
            finally:
                with self.lock:
                    if self.session is session:
                        self.session = None

        logger.info(f"Finalizing recording: {len(session.accumulated_chunks)} fragments, "
                    f"{session.total_bytes} bytes")
        wav_bytes = self._to_wav(session.accumulated_chunks)
        asset = await encode_bytes(wav_bytes, RECORDING_MIME_TYPE)

        if callback is not None:
            await callback(asset)
        return asset

    def _to_wav(self, chunks) -> bytes:
        buffer = io.BytesIO()
        with wave.open(buffer, 'wb') as wf:
            wf.setnchannels(self.capture.channels)
            wf.setsampwidth(pyaudio.get_sample_size(self.capture.format))
            wf.setframerate(self.capture.sample_rate)
            for chunk in chunks:
                wf.writeframes(chunk)
        return buffer.getvalue()

    def close(self) -> None:
        """Release the microphone and stop listening for fragments."""
        if self.session is not None:
            self.session.is_active = False
        self.capture.stop_recording()
        with self.lock:
            self.session = None
        if pub.isSubscribed(self._on_audio_event, self.topic):
            pub.unsubscribe(self._on_audio_event, self.topic)
        logger.info("CaptureController closed")
