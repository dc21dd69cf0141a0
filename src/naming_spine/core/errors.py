"""
Structured error types for naming-spine.

Every failure the transformer, manifest loader, or linter can raise is a
``NamingError`` subclass carrying a category, structured context, and the
process exit code the CLI should use.  All failures are deterministic
validation errors: nothing is ever retried, since the same input always
produces the same error.

Manifesto:
    - **Typed Error Hierarchy:** One class per failure the user can act on
    - **Rich Context:** Errors name the descriptor and the rule that failed
    - **Error Chaining:** Original exceptions are kept as ``cause``
    - **No Retry Semantics:** Pure functions fail the same way every time

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                         NamingError                           │
        │        (category, context, cause, exit_code)                  │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  MalformedDescriptor     UnsupportedObjectKind                │
        │  (VALIDATION, exit 2)    (VALIDATION, exit 2)                 │
        │        │                                                      │
        │  ManifestError                                                │
        │  (CONFIG, exit 2)                                             │
        │                                                               │
        │  AmbiguousParse          UnrecognizedIdentifier               │
        │  (PARSE, exit 1)         (PARSE, exit 1)                      │
        │                                                               │
        │  InconsistentPair                                             │
        │  (VALIDATION, exit 1)                                         │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> err = MalformedDescriptor("logical name is empty", field="logical_name")
    >>> err.exit_code
    2
    >>> err.with_context(rule="required-field").context.rule
    'required-field'

Tags:
    error-handling, exception-hierarchy, error-context, naming-spine

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and reporting."""

    VALIDATION = "VALIDATION"
    PARSE = "PARSE"
    CONFIG = "CONFIG"
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to a naming error.

    Attributes:
        descriptor: Human-readable label of the descriptor being processed
        identifier: Rendered identifier text being parsed or compared
        rule: Name of the naming rule that failed
        source: File or manifest entry the input came from
        metadata: Additional key-value pairs
    """

    descriptor: str | None = None
    identifier: str | None = None
    rule: str | None = None
    source: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["descriptor", "identifier", "rule", "source"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class NamingError(Exception):
    """
    Base exception for all naming-spine errors.

    Subclasses set ``default_category`` and ``exit_code`` so callers and the
    CLI can route failures without inspecting messages.

    Examples:
        >>> error = NamingError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.to_dict()["error_type"]
        'NamingError'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    # Exit code the CLI reports for this error
    exit_code: int = 1

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> NamingError:
        """
        Add context to this error (fluent API).

        Usage:
            raise MalformedDescriptor("missing schema").with_context(
                descriptor="table Product",
                rule="schema-required",
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __str__(self) -> str:
        parts = [self.message]
        if self.context.descriptor:
            parts.append(f"descriptor: {self.context.descriptor}")
        if self.context.rule:
            parts.append(f"rule: {self.context.rule}")
        return " | ".join(parts)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# DESCRIPTOR ERRORS (exit 2)
# =============================================================================


class MalformedDescriptor(NamingError):
    """
    A descriptor is missing a required field, carries a forbidden one, or
    holds a value that cannot be rendered (e.g. an already-rendered name).
    """

    default_category = ErrorCategory.VALIDATION
    exit_code = 2

    def __init__(self, message: str, *, field: str | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class UnsupportedObjectKind(NamingError):
    """The object kind is outside the enumerated set."""

    default_category = ErrorCategory.VALIDATION
    exit_code = 2

    def __init__(self, kind: Any, message: str | None = None, **kwargs: Any):
        super().__init__(message or f"Unsupported object kind: {kind!r}", **kwargs)
        self.kind = kind


class ManifestError(MalformedDescriptor):
    """A manifest file could not be read or does not validate."""

    default_category = ErrorCategory.CONFIG


# =============================================================================
# PARSE / PAIR ERRORS (exit 1)
# =============================================================================


class UnrecognizedIdentifier(NamingError):
    """Identifier text matches no rule of either convention."""

    default_category = ErrorCategory.PARSE

    def __init__(self, identifier: str, message: str | None = None, **kwargs: Any):
        super().__init__(
            message or f"Identifier {identifier!r} does not follow any naming convention",
            **kwargs,
        )
        self.identifier = identifier
        self.context.identifier = identifier


class AmbiguousParse(NamingError):
    """
    Reverse-mapping an identifier yields more than one descriptor.

    ``candidates`` holds every surviving interpretation so the caller can
    show them or narrow the parse with a kind or catalog.
    """

    default_category = ErrorCategory.PARSE

    def __init__(self, identifier: str, candidates: Sequence[Any], **kwargs: Any):
        labels = ", ".join(str(c) for c in candidates)
        super().__init__(
            f"Identifier {identifier!r} is ambiguous: {len(candidates)} interpretations ({labels})",
            **kwargs,
        )
        self.identifier = identifier
        self.candidates = tuple(candidates)
        self.context.identifier = identifier

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["candidates"] = [str(c) for c in self.candidates]
        return result


class InconsistentPair(NamingError):
    """A snake_case and a PascalCase rendering describe different objects."""

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        snake: str,
        pascal: str,
        differences: dict[str, tuple[Any, Any]],
        **kwargs: Any,
    ):
        detail = "; ".join(f"{name}: {a!r} != {b!r}" for name, (a, b) in differences.items())
        super().__init__(f"{snake} and {pascal} name different objects ({detail})", **kwargs)
        self.snake = snake
        self.pascal = pascal
        self.differences = differences

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["differences"] = {k: [str(a), str(b)] for k, (a, b) in self.differences.items()}
        return result


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "NamingError",
    "MalformedDescriptor",
    "UnsupportedObjectKind",
    "ManifestError",
    "UnrecognizedIdentifier",
    "AmbiguousParse",
    "InconsistentPair",
]
