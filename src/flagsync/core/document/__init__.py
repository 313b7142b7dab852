"""Documentos de feature flags: schema v1 e loader JSON."""

from .loader import load_document, parse_document
from .schema import (
    DEFAULT_REMOVAL_MARKER,
    SCHEMA_VERSION,
    FlagDocument,
    is_marked_for_removal,
    validate_document,
)

__all__ = [
    "DEFAULT_REMOVAL_MARKER",
    "SCHEMA_VERSION",
    "FlagDocument",
    "is_marked_for_removal",
    "validate_document",
    "load_document",
    "parse_document",
]
