"""Gemini model gateway: the only component that talks to the remote model."""

import base64
import time
import logging
from typing import List, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from google.genai.types import Modality

from ..config import MediaMuseConfig
from ..errors import GenerationError, RemoteCallError
from ..models.media import MediaAsset

logger = logging.getLogger(__name__)


ANALYZE_PROMPT = (
    "Analyze this image in detail. Describe what you see, including objects, "
    "colors, mood, and any text present."
)
IDENTIFY_PROMPT = (
    "Identify this song. Return the artist, title, and album if possible. "
    "Format the response nicely."
)
ANALYZE_FALLBACK = "Could not analyze the image."
IDENTIFY_FALLBACK = "Could not identify the song."


def create_client(config: MediaMuseConfig) -> genai.Client:
    """Build the process-wide Gemini client from configuration."""
    return genai.Client(
        api_key=config.get_api_key(),
        http_options=types.HttpOptions(timeout=config.timeout_ms),
    )


def _inline_part(asset: MediaAsset) -> types.Part:
    return types.Part(inline_data=types.Blob(mime_type=asset.mime_type, data=asset.binary_data))


class ModelGateway:
    """Single request/response round trips against the Gemini API.

    No call is retried. Transport and endpoint failures surface as
    RemoteCallError with the original exception chained.
    """

    def __init__(self, client: genai.Client, config: MediaMuseConfig):
        """Initialize gateway.

        Args:
            client: Configured Gemini client, created once at startup
            config: Application configuration (model identifiers)
        """
        self.client = client
        self.edit_model = config.edit_model
        self.text_model = config.text_model
        logger.info(f"ModelGateway initialized: edit={self.edit_model}, text={self.text_model}")

    async def _generate(self, operation: str, model: str, parts: List[types.Part],
                        config: Optional[types.GenerateContentConfig] = None) -> types.GenerateContentResponse:
        start_time = time.time()
        try:
            response = await self.client.aio.models.generate_content(
                model=model,
                contents=[types.Content(role="user", parts=parts)],
                config=config,
            )
        except genai_errors.APIError as e:
            logger.error("Gemini API error during %s: %s", operation, e)
            raise RemoteCallError(f"Gemini API error during {operation}: {e}", cause=e) from e
        except httpx.HTTPError as e:
            logger.error("Transport error during %s: %s", operation, e)
            raise RemoteCallError(f"Transport error during {operation}: {e}", cause=e) from e
        except ValueError as e:
            # UnknownApiResponseError and response validation errors
            logger.error("Malformed response during %s: %s", operation, e)
            raise RemoteCallError(f"Malformed response during {operation}: {e}", cause=e) from e

        logger.debug(f"{operation} completed in {time.time() - start_time:.2f}s using {model}")
        return response

    async def edit_image(self, primary: MediaAsset, prompt: str,
                         secondary: Optional[MediaAsset] = None) -> List[str]:
        """Edit or merge images according to a prompt.

        Images go first and the prompt last; the model output depends on that
        order.

        Returns:
            Base64 strings of every returned image, in response order

        Raises:
            GenerationError: If the response carries no image
            RemoteCallError: On transport or endpoint failure
        """
        parts = [_inline_part(primary)]
        if secondary is not None:
            parts.append(_inline_part(secondary))
        parts.append(types.Part(text=prompt))

        config = types.GenerateContentConfig(response_modalities=[Modality.IMAGE])
        response = await self._generate("edit_image", self.edit_model, parts, config)

        images = []
        candidates = response.candidates or []
        if candidates and candidates[0].content and candidates[0].content.parts:
            for part in candidates[0].content.parts:
                if part.inline_data and part.inline_data.data:
                    images.append(base64.b64encode(part.inline_data.data).decode("utf-8"))

        if not images:
            raise GenerationError("No image generated")

        logger.info(f"edit_image returned {len(images)} image(s)")
        return images

    async def analyze_image(self, asset: MediaAsset) -> str:
        """Describe an image in detail; falls back to a fixed message on empty text."""
        response = await self._generate(
            "analyze_image", self.text_model, [_inline_part(asset), types.Part(text=ANALYZE_PROMPT)])
        return response.text or ANALYZE_FALLBACK

    async def identify_song(self, asset: MediaAsset) -> str:
        """Identify the song in an audio clip; falls back to a fixed message on empty text."""
        response = await self._generate(
            "identify_song", self.text_model, [_inline_part(asset), types.Part(text=IDENTIFY_PROMPT)])
        return response.text or IDENTIFY_FALLBACK
