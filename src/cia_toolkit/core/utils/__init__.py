"""
Core Utilities Package

Serialization helpers shared by the builder and the registry.
"""

from .serialization import (
    deserialize_header,
    serialize_header,
    serialize_paper_summary,
    serialize_weightage,
)

__all__ = [
    "deserialize_header",
    "serialize_header",
    "serialize_paper_summary",
    "serialize_weightage",
]
