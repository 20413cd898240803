"""
Schemas Package

JSON schema definition of the paper payload and validation utilities.
"""

from .validator import (
    validate_payload,
    validate_payload_file,
    parse_marks,
    format_path,
    ValidationError,
)

__all__ = [
    "validate_payload",
    "validate_payload_file",
    "parse_marks",
    "format_path",
    "ValidationError",
]
