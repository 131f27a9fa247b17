"""
docfill Core Package

Shared data models and error types. Everything here is immutable so results
can be handed between threads without copying.
"""

from .errors import InvalidInput, ExtractionWarning, OversizedElementWarning
from .models import Field, FieldKind

__all__ = [
    "InvalidInput",
    "ExtractionWarning",
    "OversizedElementWarning",
    "Field",
    "FieldKind",
]
