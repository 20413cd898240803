"""
Images Package

Decoding and probing of submitted image strings.
"""

from .provider import (
    DEFAULT_IMAGE_SIZE,
    ImageDecodeError,
    decode_image,
    probe_image,
    split_encoded,
    to_png_bytes,
)

__all__ = [
    "DEFAULT_IMAGE_SIZE",
    "ImageDecodeError",
    "decode_image",
    "probe_image",
    "split_encoded",
    "to_png_bytes",
]
