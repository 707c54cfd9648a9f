"""Pytest configuration and fixtures for MediaMuse tests."""

import pytest
from types import SimpleNamespace
import time
import logging
from pathlib import Path
from unittest.mock import AsyncMock, Mock, patch

import numpy as np
from google.genai import types

from mediamuse.config import MediaMuseConfig
from mediamuse.gateway.model_gateway import ModelGateway


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Smallest valid JPEG/PNG headers are enough; nothing decodes the pixels
JPEG_BYTES = b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01' + b'\x00' * 64 + b'\xff\xd9'
PNG_BYTES = b'\x89PNG\r\n\x1a\n' + b'\x00' * 64


@pytest.fixture
def sample_audio_chunk():
    """Generate a sample audio chunk for testing."""
    # 1024 samples of 16-bit audio (sine wave)
    sample_rate = 16000
    duration = 1024 / sample_rate
    freq = 440  # A4 note

    t = np.linspace(0, duration, 1024, False)
    wave_data = np.sin(2 * np.pi * freq * t)

    audio_data = (wave_data * 32767).astype(np.int16)
    return audio_data.tobytes()


@pytest.fixture
def mock_pyaudio():
    """Mock PyAudio for testing without actual audio hardware.

    ``stream.read`` sleeps briefly like a real device and records every
    fragment it hands out in ``fragments``.
    """
    with patch('pyaudio.PyAudio') as mock_pyaudio_class:
        mock_pyaudio_instance = Mock()
        mock_stream = Mock()
        fragments = []
        source = {'chunk': b'\x00' * 2048}

        def _read(frames, exception_on_overflow=True):
            time.sleep(0.005)
            chunk = source['chunk'] + len(fragments).to_bytes(2, 'little')
            fragments.append(chunk)
            return chunk

        mock_stream.read.side_effect = _read
        mock_stream.stop_stream.return_value = None
        mock_stream.close.return_value = None

        mock_pyaudio_instance.open.return_value = mock_stream
        mock_pyaudio_instance.terminate.return_value = None

        mock_pyaudio_class.return_value = mock_pyaudio_instance

        yield {
            'class': mock_pyaudio_class,
            'instance': mock_pyaudio_instance,
            'stream': mock_stream,
            'fragments': fragments,
            'source': source,
        }


@pytest.fixture
def jpeg_file(tmp_path) -> Path:
    path = tmp_path / "photo.jpg"
    path.write_bytes(JPEG_BYTES)
    return path


@pytest.fixture
def png_file(tmp_path) -> Path:
    path = tmp_path / "overlay.png"
    path.write_bytes(PNG_BYTES)
    return path


@pytest.fixture
def default_config():
    return MediaMuseConfig()


def image_response(*images: bytes) -> types.GenerateContentResponse:
    """Model response carrying inline image parts."""
    parts = [types.Part(inline_data=types.Blob(mime_type="image/png", data=data)) for data in images]
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=parts))]
    )


def text_response(text: str) -> types.GenerateContentResponse:
    """Model response carrying a single text part."""
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=[types.Part(text=text)]))]
    )


def empty_response() -> types.GenerateContentResponse:
    return types.GenerateContentResponse(candidates=[])


@pytest.fixture
def mock_genai_client():
    """Stand-in for genai.Client with an awaitable generate_content."""
    client = Mock()
    client.aio.models.generate_content = AsyncMock(return_value=empty_response())
    return client


@pytest.fixture
def gateway(mock_genai_client, default_config):
    return ModelGateway(mock_genai_client, default_config)


@pytest.fixture
def fake_gateway():
    """ModelGateway double for controller tests."""
    fake = Mock(spec=ModelGateway)
    fake.edit_image = AsyncMock(return_value=["aGVsbG8="])
    fake.analyze_image = AsyncMock(return_value="A red bicycle leaning on a wall.")
    fake.identify_song = AsyncMock(return_value="Artist: Queen\nTitle: Bohemian Rhapsody")
    return fake


@pytest.fixture
def responses():
    """Builders for canned model responses."""
    return SimpleNamespace(
        image=image_response,
        text=text_response,
        empty=empty_response,
    )
