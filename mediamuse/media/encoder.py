"""Turn files and in-memory blobs into base64 media assets."""

import asyncio
import base64
import binascii
import logging
import mimetypes
from pathlib import Path
from typing import Optional, Union

from ..errors import EncodingError
from ..models.media import MediaAsset

logger = logging.getLogger(__name__)


def _build_asset(data: bytes, mime_type: str) -> MediaAsset:
    return MediaAsset(
        mime_type=mime_type,
        binary_data=data,
        base64=base64.b64encode(data).decode("ascii"),
    )


async def encode_file(path: Union[str, Path], mime_type: Optional[str] = None) -> MediaAsset:
    """Read a file and encode it as a MediaAsset.

    The file is read in a worker thread so the event loop stays responsive.

    Args:
        path: File to read
        mime_type: Declared mime type. Guessed from the file name when omitted.

    Raises:
        EncodingError: If the file cannot be read or its type is unknown
    """
    path = Path(path)
    if mime_type is None:
        mime_type, _ = mimetypes.guess_type(path.name)
        if mime_type is None:
            raise EncodingError(f"Cannot determine mime type of {path}")

    try:
        data = await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        logger.error(f"Failed to read {path}: {e}")
        raise EncodingError(f"Cannot read {path}: {e}") from e

    asset = await asyncio.to_thread(_build_asset, data, mime_type)
    logger.debug(f"Encoded {path} ({mime_type}, {len(data)} bytes)")
    return asset


async def encode_bytes(data: bytes, mime_type: str) -> MediaAsset:
    """Encode an in-memory blob, such as a finished recording."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise EncodingError(f"Cannot encode object of type {type(data).__name__}")
    return await asyncio.to_thread(_build_asset, bytes(data), mime_type)


def decode_base64(text: str) -> bytes:
    """Decode a base64 payload produced by the gateway or the encoder."""
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Invalid base64 payload: {e}") from e
