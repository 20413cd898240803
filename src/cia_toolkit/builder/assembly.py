"""
Module: builder.assembly

Purpose:
    Build the immutable PaperModel from a submitted payload. Validates
    first (schema + semantic rules), then decodes images and creates
    the question dataclasses. Nothing downstream ever sees the raw dict.

Key Functions:
    - build_paper_model(): Payload dict -> PaperModel

Dependencies:
    - cia_toolkit.core.schemas: Payload validation
    - builder.images.provider: Image decoding

Used By:
    - builder.controller: First pipeline stage
"""

from __future__ import annotations

import logging
from typing import Any, Sequence, Tuple

from cia_toolkit.common import DEFAULT_PATTERN, DEFAULT_TAXONOMY, PaperPattern, Taxonomy
from cia_toolkit.core.models import (
    Alternative,
    EitherOrGroup,
    FlatAlternative,
    Header,
    ImageAsset,
    Marks,
    PaperModel,
    ShortAnswerQuestion,
    SubdividedAlternative,
    Subdivision,
)
from cia_toolkit.core.schemas import parse_marks, validate_payload

from .images import DEFAULT_IMAGE_SIZE, decode_image

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    """Payload string field; None and missing become ""."""
    if value is None:
        return ""
    return str(value)


def _number(value: Any, default: int) -> str:
    text = _text(value).strip()
    return text or str(default)


def _images(encoded: Sequence[str] | None, default_size: Tuple[int, int]) -> Tuple[ImageAsset, ...]:
    return tuple(decode_image(item, default_size=default_size) for item in encoded or ())


def _build_header(data: dict[str, Any]) -> Header:
    return Header(
        academic_year=_text(data.get("academicYear")).strip(),
        assessment_index=_text(data.get("ciaType")).strip(),
        course_code=_text(data["courseCode"]).strip(),
        course_title=_text(data["courseTitle"]).strip(),
        programme=_text(data["programme"]).strip(),
        semester=_text(data["semester"]).strip(),
        date=_text(data["date"]).strip(),
        session=_text(data["session"]).strip(),
        common_to=_text(data.get("commonTo")).strip(),
        permitting_notes=_text(data.get("permittingNotes")).strip(),
    )


def _build_alternative(
    data: dict[str, Any],
    pattern: PaperPattern,
    default_size: Tuple[int, int],
) -> Alternative:
    images = _images(data.get("images"), default_size)
    subdivisions = data.get("subdivisions") or []

    # An empty subdivision list is the same as none: a flat alternative
    if not subdivisions:
        return FlatAlternative(
            text=_text(data.get("text")),
            category=data["co"],
            level=data["btl"],
            images=images,
            marks=Marks.implicit(pattern.part_b_marks),
        )

    return SubdividedAlternative(
        subdivisions=tuple(
            Subdivision(
                label=_text(sub["label"]).strip(),
                text=_text(sub["text"]),
                marks=Marks.explicit(parse_marks(sub["marks"])),
                images=_images(sub.get("images"), default_size),
            )
            for sub in subdivisions
        ),
        category=data["co"],
        level=data["btl"],
        stem=_text(data.get("text")),
        images=images,
    )


def build_paper_model(
    payload: dict[str, Any],
    *,
    pattern: PaperPattern = DEFAULT_PATTERN,
    taxonomy: Taxonomy = DEFAULT_TAXONOMY,
    default_image_size: Tuple[int, int] = DEFAULT_IMAGE_SIZE,
) -> PaperModel:
    """
    Validate a payload and build the document model.

    Args:
        payload: Decoded JSON payload (camelCase keys)
        pattern: Question counts and fixed marks
        taxonomy: Allowed CO/BTL tags
        default_image_size: Placeholder size for images that cannot be probed

    Returns:
        PaperModel

    Raises:
        ValidationError: If the payload is invalid (nothing is built)

    Example:
        >>> paper = build_paper_model(payload)
        >>> [q.number for q in paper.part_a]
        ['1', '2', '3', '4', '5', '6']
    """
    validate_payload(payload, pattern=pattern, taxonomy=taxonomy)

    header = _build_header(payload["header"])

    part_a = tuple(
        ShortAnswerQuestion(
            number=_number(item.get("qNo"), i + 1),
            text=_text(item["text"]),
            category=item["co"],
            level=item["btl"],
            images=_images(item.get("images"), default_image_size),
            marks=Marks.implicit(pattern.part_a_marks),
        )
        for i, item in enumerate(payload["partA"])
    )

    part_b = tuple(
        EitherOrGroup(
            number=_number(item.get("qNo"), pattern.part_b_first_number + i),
            a=_build_alternative(item["a"], pattern, default_image_size),
            b=_build_alternative(item["b"], pattern, default_image_size),
        )
        for i, item in enumerate(payload["partB"])
    )

    paper = PaperModel(header=header, part_a=part_a, part_b=part_b)
    logger.debug(f"Built paper model for {header.course_code}: {paper.total_marks} marks")
    return paper
