"""Microphone capture with fragment publishing."""

import pyaudio
import logging
import threading
from threading import Thread, Event
from typing import Optional, Callable
from datetime import datetime

import numpy as np

from ..errors import MicrophonePermissionError
from ..models.audio import AudioStats
from ..models.events import AudioEvent


logger = logging.getLogger(__name__)


class AudioCapture:
    """Owns the microphone device and publishes every fragment it reads.

    The device is opened synchronously by ``start_recording`` so a refusal is
    reported to the caller. It is released exactly once per recording, whichever
    way the recording ends.
    """

    def __init__(
        self,
        callback: Callable[[AudioEvent], None],
        sample_rate: int = 16000,
        chunk_size: int = 1024,
        channels: int = 1,
        format: int = pyaudio.paInt16,
    ):
        """Initialize audio capture with specified parameters.

        Args:
            callback: Receives each AudioEvent, called from the reader thread
            sample_rate: Audio sample rate in Hz
            chunk_size: Size of each audio fragment in samples
            channels: Number of audio channels (1 for mono)
            format: PyAudio sample format (16-bit signed int)
        """
        self.audio_event_callback = callback
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.channels = channels
        self.format = format

        # Recording thread management
        self.recording_thread: Optional[Thread] = None
        self.stop_event = Event()
        self.is_recording = False

        # Statistics tracking
        self.start_time: Optional[datetime] = None
        self.total_chunks = 0
        self.peak_level = 0.0

        # Device handles, released by _release_device
        self.pyaudio_instance: Optional[pyaudio.PyAudio] = None
        self.stream = None
        self._device_open = False
        self._release_lock = threading.Lock()

    def start_recording(self) -> None:
        """Open the microphone and start reading in a background thread.

        Raises:
            MicrophonePermissionError: If the input device cannot be opened
        """
        if self.is_recording:
            logger.warning("Recording already in progress")
            return

        logger.info("Starting audio recording")
        self.__open_audio_stream()

        self.stop_event.clear()
        self.start_time = datetime.now()
        self.total_chunks = 0
        self.peak_level = 0.0

        self.recording_thread = Thread(target=self._record_continuously, daemon=True)
        self.recording_thread.name = "AudioCaptureThread"
        self.is_recording = True
        self.recording_thread.start()

    def stop_recording(self) -> None:
        """Stop recording and release the device."""
        if not self.is_recording:
            logger.debug("No recording in progress")
            return

        logger.info("Stopping audio recording")
        self.stop_event.set()

        if self.recording_thread and self.recording_thread.is_alive():
            self.recording_thread.join(timeout=2.0)
            if self.recording_thread.is_alive():
                logger.warning("Recording thread did not stop cleanly")

        self._release_device()
        self.is_recording = False
        logger.info(f"Recording stopped. Total chunks: {self.total_chunks}")

    def __open_audio_stream(self) -> None:
        instance = pyaudio.PyAudio()
        try:
            self.stream = instance.open(
                format=self.format,
                channels=self.channels,
                rate=self.sample_rate,
                input=True,
                frames_per_buffer=self.chunk_size,
                stream_callback=None
            )
        except OSError as e:
            instance.terminate()
            logger.error(f"Could not open microphone: {e}")
            raise MicrophonePermissionError(f"Could not access microphone: {e}") from e

        self.pyaudio_instance = instance
        self._device_open = True
        logger.info(f"Audio stream opened: {self.sample_rate}Hz, "
                    f"{self.chunk_size} samples/chunk")

    def _release_device(self) -> None:
        """Stop the stream and terminate PyAudio; later calls do nothing."""
        with self._release_lock:
            if not self._device_open:
                return
            self._device_open = False
            stream, self.stream = self.stream, None
            instance, self.pyaudio_instance = self.pyaudio_instance, None

        try:
            if stream is not None:
                stream.stop_stream()
                stream.close()
        finally:
            if instance is not None:
                instance.terminate()
            logger.info("Microphone released")

    def __read_audio_chunk(self) -> bytes:
        audio_chunk = self.stream.read(self.chunk_size, exception_on_overflow=False)
        self.total_chunks += 1
        if audio_chunk:
            samples = np.frombuffer(audio_chunk, dtype=np.int16)
            if samples.size:
                level = float(np.abs(samples.astype(np.int32)).max()) / 32768.0
                self.peak_level = max(self.peak_level, level)
        return audio_chunk

    def __publish_audio_event(self, audio_chunk: bytes) -> None:
        audio_event = AudioEvent(
            audio_data=audio_chunk,
            sequence_number=self.total_chunks,
            final=self.stop_event.is_set()
        )
        self.audio_event_callback(audio_event)

    def _record_continuously(self) -> None:
        """Internal method: read fragments until stopped, then release the device."""
        try:
            while not self.stop_event.is_set():
                audio_chunk = self.__read_audio_chunk()
                self.__publish_audio_event(audio_chunk)
            # Final fragment so consumers know we are done
            audio_chunk = self.__read_audio_chunk()
            self.__publish_audio_event(audio_chunk)
        except OSError as e:
            logger.error(f"Audio read failed: {e}")
        finally:
            self._release_device()

    def get_recording_stats(self) -> AudioStats:
        """Get current recording statistics."""
        duration = 0.0
        if self.start_time:
            duration = (datetime.now() - self.start_time).total_seconds()

        return AudioStats(
            is_recording=self.is_recording,
            duration_seconds=duration,
            sample_rate=self.sample_rate,
            chunk_size=self.chunk_size,
            total_chunks=self.total_chunks,
            peak_level=self.peak_level,
        )

    def __del__(self):
        """Ensure the device is released on deletion."""
        if getattr(self, "is_recording", False):
            self.stop_recording()
