"""
Module: builder.layout.config

Purpose:
    Physical layout settings shared by both renderers. Everything is
    stored in centimetres or points; each renderer converts to its own
    native unit (ReportLab points, python-docx EMU/twips).

Key Classes:
    - LayoutConfig: Immutable layout configuration
    - InstitutionConfig: Fixed header lines of the issuing institution

Dependencies:
    - dataclasses (std)

Used By:
    - builder.layout.sections: Column widths
    - builder.output.pdf_renderer
    - builder.output.docx_renderer
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


# A4 portrait
DEFAULT_PAGE_WIDTH_CM = 21.0
DEFAULT_PAGE_HEIGHT_CM = 29.7


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for page layout (immutable).

    Attributes:
        page_width_cm / page_height_cm: Page size
        margin_cm: Uniform page margin
        font_name: Body font for the PDF (a ReportLab standard font, or the
            name to register font_path under)
        font_path: Optional TrueType file registered as font_name
        docx_font_name: Body font for the DOCX
        font_size_pt: Body font size
        part_a_columns: Column fractions for Q. No. | Questions | CO | BTL
        part_b_columns: Column fractions for Q. No. | (a)/(b) | Questions | CO | BTL
        weightage_columns: Column fractions for the weightage table
        index_column_cm: Width of the nested index column
        marks_column_cm: Width of the nested marks column
        image_max_width_cm / image_max_height_cm: Bounding box for figures
        image_dpi: Pixel density used to size figures from pixel dimensions
        reg_no_boxes: Number of register-number boxes

    Example:
        >>> config = LayoutConfig()
        >>> round(config.content_width_cm, 1)
        18.0
    """

    # Page
    page_width_cm: float = DEFAULT_PAGE_WIDTH_CM
    page_height_cm: float = DEFAULT_PAGE_HEIGHT_CM
    margin_cm: float = 1.5

    # Fonts
    font_name: str = "Times-Roman"
    bold_font_name: str = "Times-Bold"
    font_path: Optional[str] = None  # TTF for font_name; standard fonts lack Greek glyphs
    bold_font_path: Optional[str] = None
    docx_font_name: str = "Times New Roman"
    font_size_pt: float = 11.0

    # Tables (fractions of content width)
    part_a_columns: Tuple[float, ...] = (0.08, 0.72, 0.10, 0.10)
    part_b_columns: Tuple[float, ...] = (0.08, 0.06, 0.66, 0.10, 0.10)
    weightage_columns: Tuple[float, ...] = (0.14, 0.08, 0.11, 0.11, 0.11, 0.11, 0.11, 0.11, 0.12)

    # Nested index | content | marks table
    index_column_cm: float = 0.9
    marks_column_cm: float = 1.2

    # Figures
    image_max_width_cm: float = 12.0
    image_max_height_cm: float = 9.0
    image_dpi: float = 96.0

    # Register number strip
    reg_no_boxes: int = 12
    reg_no_box_cm: float = 0.6

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.content_width_cm <= 0:
            raise ValueError("Margins exceed page width")
        if self.font_size_pt <= 0:
            raise ValueError(f"font_size_pt must be positive: {self.font_size_pt}")
        for name in ("part_a_columns", "part_b_columns", "weightage_columns"):
            total = sum(getattr(self, name))
            if abs(total - 1.0) > 0.01:
                raise ValueError(f"{name} must sum to 1.0, got {total:.2f}")
        if self.image_max_width_cm <= 0 or self.image_max_height_cm <= 0:
            raise ValueError("Image bounds must be positive")
        if self.reg_no_boxes < 0:
            raise ValueError(f"reg_no_boxes must be non-negative: {self.reg_no_boxes}")

    @property
    def content_width_cm(self) -> float:
        """Width available for content (excluding margins)."""
        return self.page_width_cm - 2 * self.margin_cm

    def column_widths_cm(self, fractions: Tuple[float, ...]) -> Tuple[float, ...]:
        """Absolute column widths for a tuple of fractions."""
        return tuple(self.content_width_cm * f for f in fractions)


@dataclass(frozen=True)
class InstitutionConfig:
    """Institution lines printed at the top of every paper."""

    name: str = "M.I.E.T. ENGINEERING COLLEGE"
    autonomy: str = "(AUTONOMOUS)"
    address: str = "Tiruchirappalli-620007"

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("Institution name must not be blank")
