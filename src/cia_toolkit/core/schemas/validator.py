"""
Payload Validation Utilities

Validates a submitted paper payload before any model is built.

Two passes, both fail-fast as a whole (every problem is collected, then
one ValidationError is raised):

1. Structural: JSON Schema (`paper.schema.json`) checked with jsonschema.
2. Semantic: counts from the paper pattern, non-blank header fields,
   CO/BTL tags from the taxonomy, declared marks vs subdivision sums.

Nothing is rendered when validation fails.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable

from jsonschema import Draft202012Validator

from ...common import DEFAULT_PATTERN, DEFAULT_TAXONOMY, PaperPattern, Taxonomy

logger = logging.getLogger(__name__)

REQUIRED_HEADER_FIELDS = ("courseCode", "courseTitle", "programme", "semester", "date", "session")

SCHEMA_DIR = Path(__file__).parent


@lru_cache(maxsize=None)
def _load_schema(name: str) -> dict:
    """Read ``<name>.schema.json`` once per process."""
    return json.loads((SCHEMA_DIR / f"{name}.schema.json").read_text(encoding="utf-8"))


class ValidationError(Exception):
    """Raised when a payload fails schema or semantic validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def format_path(parts: Iterable[Any]) -> str:
    """
    Render a JSON path as dotted text with list indices in brackets.

    Example:
        >>> format_path(["partB", 1, "a", "subdivisions", 0, "marks"])
        'partB[1].a.subdivisions[0].marks'
    """
    text = ""
    for part in parts:
        if isinstance(part, int):
            text += f"[{part}]"
        else:
            text += f".{part}" if text else str(part)
    return text


def parse_marks(value: Any) -> int:
    """
    Parse a marks value typed as an integer or a numeric string.

    Raises:
        ValueError: If the value is not a non-negative integer.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid marks: {value!r}")
    if isinstance(value, int):
        result = value
    elif isinstance(value, str) and value.strip().isdigit():
        result = int(value.strip())
    else:
        raise ValueError(f"Invalid marks: {value!r} (must be non-negative integer)")
    if result < 0:
        raise ValueError(f"Invalid marks: {value!r} (must be non-negative integer)")
    return result


def _raise_if_errors(problems: list[tuple[str, str]]) -> None:
    if not problems:
        return
    path, message = problems[0]
    errors = [f"{p}: {m}" if p else m for p, m in problems]
    raise ValidationError(
        f"{message}" + (f" (and {len(problems) - 1} more)" if len(problems) > 1 else ""),
        path=path,
        errors=errors,
    )


def _check_schema(data: Any) -> None:
    validator = Draft202012Validator(_load_schema("paper"))
    problems = [
        (format_path(e.absolute_path), e.message)
        for e in sorted(validator.iter_errors(data), key=lambda e: list(map(str, e.absolute_path)))
    ]
    if problems:
        logger.debug(f"Schema validation found {len(problems)} problem(s)")
    _raise_if_errors(problems)


def _check_tags(
    item: dict[str, Any],
    path: str,
    taxonomy: Taxonomy,
    allowed_levels: tuple[str, ...],
    problems: list[tuple[str, str]],
) -> None:
    if item["co"] not in taxonomy.categories:
        problems.append((f"{path}.co", f"Unknown category {item['co']!r} (expected one of {list(taxonomy.categories)})"))
    if item["btl"] not in allowed_levels:
        problems.append((f"{path}.btl", f"Level {item['btl']!r} not allowed here (expected one of {list(allowed_levels)})"))


def _check_alternative(
    alt: dict[str, Any],
    path: str,
    pattern: PaperPattern,
    taxonomy: Taxonomy,
    problems: list[tuple[str, str]],
) -> None:
    _check_tags(alt, path, taxonomy, taxonomy.level_tags, problems)

    # Every alternative carries the pattern's marks; "marks" may only restate it
    declared = parse_marks(alt["marks"]) if "marks" in alt else pattern.part_b_marks
    subdivisions = alt.get("subdivisions") or []
    if subdivisions:
        total = sum(parse_marks(sub["marks"]) for sub in subdivisions)
        if total != declared:
            if "marks" in alt:
                problems.append((f"{path}.marks", f"Declared marks {declared} do not match subdivision total {total}"))
            else:
                problems.append((
                    f"{path}.subdivisions",
                    f"Subdivision total {total} does not match the {declared} marks an alternative carries",
                ))
    if declared != pattern.part_b_marks:
        problems.append((
            f"{path}.marks",
            f"Declared marks {declared} differ from the {pattern.part_b_marks} marks an alternative carries",
        ))


def validate_payload(
    data: dict[str, Any],
    *,
    pattern: PaperPattern = DEFAULT_PATTERN,
    taxonomy: Taxonomy = DEFAULT_TAXONOMY,
) -> None:
    """
    Validate a paper payload.

    Args:
        data: Decoded JSON payload (camelCase keys)
        pattern: Expected question counts
        taxonomy: Allowed CO and BTL tags

    Raises:
        ValidationError: If the payload is structurally or semantically
            invalid. ``errors`` lists every problem found.
    """
    _check_schema(data)

    problems: list[tuple[str, str]] = []

    header = data["header"]
    for name in REQUIRED_HEADER_FIELDS:
        if not header[name].strip():
            problems.append((f"header.{name}", f"{name} must not be blank"))

    part_a = data["partA"]
    if len(part_a) != pattern.part_a_count:
        problems.append(("partA", f"Expected {pattern.part_a_count} Part A questions, got {len(part_a)}"))
    for i, question in enumerate(part_a):
        _check_tags(question, f"partA[{i}]", taxonomy, taxonomy.short_answer_levels, problems)

    part_b = data["partB"]
    if len(part_b) != pattern.part_b_count:
        problems.append(("partB", f"Expected {pattern.part_b_count} Part B groups, got {len(part_b)}"))
    for i, group in enumerate(part_b):
        for label in ("a", "b"):
            _check_alternative(group[label], f"partB[{i}].{label}", pattern, taxonomy, problems)

    if problems:
        logger.debug(f"Semantic validation found {len(problems)} problem(s)")
    _raise_if_errors(problems)


def validate_payload_file(path: Path, **kwargs: Any) -> dict[str, Any]:
    """Load a JSON payload file, validate it and return the decoded data."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in {path}: {e.msg}", path="", errors=[str(e)]) from e
    validate_payload(data, **kwargs)
    return data

