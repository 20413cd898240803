"""
CIA Toolkit Core Package

Shared data models, payload validation and serialization helpers.

1. **Immutable Data Models**
   - Frozen dataclasses, new instances created for any change

2. **Calculated Marks (Never Stored)**
   - Alternative and paper totals are always calculated from their parts

3. **Validate Before Build**
   - Payloads are checked against a JSON Schema before any model exists
"""

from .models import Header, Marks, PaperModel, WeightageTable

__all__ = [
    "Header",
    "Marks",
    "PaperModel",
    "WeightageTable",
]
