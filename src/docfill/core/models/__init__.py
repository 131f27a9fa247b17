"""
Core Models Package

Immutable data models shared by the extractor and the builder.
"""

from .fields import Field, FieldKind

__all__ = [
    "Field",
    "FieldKind",
]
