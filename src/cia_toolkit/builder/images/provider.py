"""
Module: builder.images.provider

Purpose:
    Decode the self-describing image strings submitted with a paper
    (data URIs or bare base64) into ImageAsset objects, probing their
    real dimensions with Pillow. Also converts assets to PNG for targets
    that cannot embed the original format.

Key Functions:
    - decode_image(): Encoded string -> ImageAsset (never raises)
    - probe_image(): Raw bytes -> (format, width, height, needs_alpha)
    - to_png_bytes(): Re-encode an asset as PNG

Key Classes:
    - ImageDecodeError: Bytes could not be decoded or probed

Dependencies:
    - PIL: Image probing and conversion

Used By:
    - builder.assembly: Question and subdivision images
    - builder.output.docx_renderer: PNG conversion
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from io import BytesIO
from typing import Tuple

from PIL import Image, UnidentifiedImageError

from cia_toolkit.core.models import ImageAsset

logger = logging.getLogger(__name__)

DATA_URI_RE = re.compile(r"^data:image/([\w.+-]+)?(?:;[\w=-]+)*;base64,(.*)$", re.DOTALL | re.IGNORECASE)

DEFAULT_IMAGE_SIZE: Tuple[int, int] = (400, 300)  # 4:3 placeholder when probing fails

FORMAT_ALIASES = {"jpg": "jpeg", "svg+xml": "svg", "x-icon": "ico"}

ALPHA_MODES = ("RGBA", "LA", "PA", "RGBa", "La")


class ImageDecodeError(Exception):
    """Image bytes could not be decoded or probed."""
    pass


def _normalise_format(tag: str) -> str:
    tag = (tag or "").lower()
    return FORMAT_ALIASES.get(tag, tag)


def split_encoded(encoded: str) -> Tuple[str, bytes]:
    """
    Split an encoded image string into (declared format, raw bytes).

    Raises:
        ImageDecodeError: If the base64 payload is malformed.
    """
    text = encoded.strip()
    declared = ""
    match = DATA_URI_RE.match(text)
    if match:
        declared = _normalise_format(match.group(1) or "")
        text = match.group(2)
    try:
        data = base64.b64decode("".join(text.split()), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid base64 image data: {e}") from e
    if not data:
        raise ImageDecodeError("Empty image data")
    return declared, data


def probe_image(data: bytes) -> Tuple[str, int, int, bool]:
    """
    Read format, pixel size and transparency from image bytes.

    Returns:
        (format, width, height, needs_alpha)

    Raises:
        ImageDecodeError: If Pillow cannot identify the image.
    """
    try:
        with Image.open(BytesIO(data)) as img:
            needs_alpha = img.mode in ALPHA_MODES or "transparency" in img.info
            return _normalise_format(img.format or ""), img.width, img.height, needs_alpha
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Cannot identify image: {e}") from e


def decode_image(
    encoded: str,
    *,
    default_size: Tuple[int, int] = DEFAULT_IMAGE_SIZE,
) -> ImageAsset:
    """
    Decode an encoded image string into an ImageAsset.

    Failures are recovered: the asset keeps whatever bytes could be
    decoded and gets ``default_size`` placeholder dimensions with
    ``probed=False``. Renderers skip assets they cannot embed.

    Args:
        encoded: "data:image/<fmt>;base64,..." or bare base64
        default_size: (width, height) used when probing fails

    Returns:
        ImageAsset
    """
    declared = ""
    data = b""
    try:
        declared, data = split_encoded(encoded)
        fmt, width, height, needs_alpha = probe_image(data)
        return ImageAsset(data=data, format=fmt or declared, width=width, height=height, needs_alpha=needs_alpha)
    except ImageDecodeError as e:
        logger.warning(f"Image could not be probed, using {default_size[0]}x{default_size[1]} placeholder: {e}")
        width, height = default_size
        return ImageAsset(data=data, format=declared, width=width, height=height, probed=False)


def to_png_bytes(asset: ImageAsset) -> bytes:
    """
    Re-encode an asset as PNG (transparency kept).

    Raises:
        ImageDecodeError: If the asset bytes cannot be opened.
    """
    try:
        with Image.open(BytesIO(asset.data)) as img:
            img.seek(0)
            target = "RGBA" if asset.needs_alpha else "RGB"
            converted = img.convert(target)
            out = BytesIO()
            converted.save(out, format="PNG")
            return out.getvalue()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Cannot convert image to PNG: {e}") from e
