"""Media encoding helpers."""

from .encoder import encode_file, encode_bytes, decode_base64

__all__ = [
    "encode_file",
    "encode_bytes",
    "decode_base64",
]
