"""
Core primitives for naming-spine: errors, logging, settings.
"""

from naming_spine.core.errors import (
    AmbiguousParse,
    ErrorCategory,
    ErrorContext,
    InconsistentPair,
    MalformedDescriptor,
    ManifestError,
    NamingError,
    UnrecognizedIdentifier,
    UnsupportedObjectKind,
)

__all__ = [
    "AmbiguousParse",
    "ErrorCategory",
    "ErrorContext",
    "InconsistentPair",
    "MalformedDescriptor",
    "ManifestError",
    "NamingError",
    "UnrecognizedIdentifier",
    "UnsupportedObjectKind",
]
