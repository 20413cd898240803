"""
Module: images

Purpose:
    ImageAsset dataclass - an embedded figure decoded from the payload,
    with the pixel dimensions both renderers use to size it.

Key Classes:
    - ImageAsset: Raw bytes plus format tag and probed dimensions

Used By:
    - builder.images.provider: Creates assets from encoded strings
    - core.models.questions: Questions and subdivisions own assets
    - builder.output: Renderers embed assets
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ImageAsset:
    """
    Decoded image ready for embedding (immutable).

    Attributes:
        data: Raw image bytes.
        format: Lower-case format tag ("png", "jpeg", "gif", ...), "" if unknown.
        width: Pixel width (fallback default when not probed).
        height: Pixel height (fallback default when not probed).
        probed: False when dimensions are placeholders because decoding failed.
        needs_alpha: True when the image carries transparency and must be
            embedded with an alpha-preserving method.

    Example:
        >>> ImageAsset(b"...", "png", 400, 200).aspect_ratio
        0.5
    """
    data: bytes = field(repr=False)
    format: str
    width: int
    height: int
    probed: bool = True
    needs_alpha: bool = False

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image dimensions must be positive: {self.width}x{self.height}")

    @property
    def aspect_ratio(self) -> float:
        """Height divided by width."""
        return self.height / self.width

    def size_cm(
        self,
        max_width_cm: float,
        max_height_cm: float,
        dpi: float = 96.0,
    ) -> tuple[float, float]:
        """
        Display size in centimetres, bounded by a box, aspect ratio kept.

        Images are shown at their natural size at ``dpi`` and only ever
        scaled down.

        Example:
            >>> ImageAsset(b"", "png", 960, 480).size_cm(12.0, 9.0)
            (12.0, 6.0)
        """
        natural_w = self.width / dpi * 2.54
        natural_h = self.height / dpi * 2.54
        scale = min(1.0, max_width_cm / natural_w, max_height_cm / natural_h)
        return natural_w * scale, natural_h * scale
