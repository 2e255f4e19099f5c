"""
Structured error types for calendar-spine.

Provides a small hierarchy of typed errors with metadata for categorization
and structured logging. Instead of bare exceptions that lose context, every
CalendarError carries:
- **Category:** What kind of error (validation, config, parse, ...)
- **Context:** Structured metadata (operation, accessor, event, custom fields)
- **Cause:** Chained underlying exception for root cause analysis

Manifesto:
    - **Typed Error Hierarchy:** Different error types for different failures
    - **Fail fast:** An event without a start date is a data bug, never a default
    - **Rich Context:** Errors carry metadata for logging
    - **Pass-through:** Date parsing errors from dateutil/datetime are not wrapped

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                      CalendarError                           │
        │               (category, context, cause)                     │
        ├─────────────────────────────────────────────────────────────┤
        │                                                              │
        │   ValidationError              ConfigError                   │
        │   (VALIDATION)                 (CONFIG)                      │
        │        │                            │                        │
        │   MissingStartDateError        InvalidConfigError            │
        │                                                              │
        └─────────────────────────────────────────────────────────────┘

    Decomposing an unbounded calendar is NOT an error: the engine logs a
    ``calendar_unbounded`` warning and returns an empty list.

Examples:
    >>> error = MissingStartDateError(accessor="field 'start'", event={"id": 1})
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> error.to_dict()["error_type"]
    'MissingStartDateError'

Tags:
    errors, exceptions, error-context, validation, configuration,
    calendar-spine

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """
    Standard error categories for classification.

    Attributes:
        VALIDATION: Event data violates an invariant (missing start date)
        CONFIG: Invalid locale, timezone, accessor or granularity
        PARSE: Unparseable date input
        INTERNAL: Bugs, unexpected state
        UNKNOWN: Uncategorized errors
    """

    VALIDATION = "VALIDATION"     # Event data violations
    CONFIG = "CONFIG"             # Invalid options
    PARSE = "PARSE"               # Date parsing, overflow
    INTERNAL = "INTERNAL"         # Bugs, unexpected state
    UNKNOWN = "UNKNOWN"           # Uncategorized errors


@dataclass
class ErrorContext:
    """
    Structured metadata context for errors.

    Only fields that are set end up in ``to_dict()``; anything not covered by
    a typed field goes to ``metadata``.

    Examples:
        >>> ctx = ErrorContext(operation="find_in_range", accessor="field 'start'")
        >>> ctx.to_dict()
        {'operation': 'find_in_range', 'accessor': "field 'start'"}

    Attributes:
        operation: Calendar operation that failed (e.g. ``"sort"``)
        accessor: Description of the accessor involved
        event: ``repr`` of the offending event
        metadata: Additional key-value pairs
    """

    operation: str | None = None
    accessor: str | None = None
    event: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["operation", "accessor", "event"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class CalendarError(Exception):
    """
    Base exception for all calendar-spine errors.

    Subclasses set ``default_category`` to classify themselves.

    Examples:
        >>> error = CalendarError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>

        Adding context fluently:

        >>> error = CalendarError("Sort failed").with_context(operation="sort")
        >>> error.context.operation
        'sort'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

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

    def with_context(self, **kwargs: Any) -> CalendarError:
        """
        Add context to this error (fluent API).

        Usage:
            raise CalendarError("Failed").with_context(operation="years")
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

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(CalendarError):
    """
    Event data validation error.

    Never recoverable locally - the data must be fixed.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


class MissingStartDateError(ValidationError):
    """The configured start accessor yields no value for an event."""

    def __init__(self, *, accessor: str, event: Any, message: str | None = None):
        self.event = event
        super().__init__(
            message or "Event has no start date.",
            field=accessor,
            context=ErrorContext(accessor=accessor, event=repr(event)),
        )


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(CalendarError):
    """
    Configuration error.

    Raised when a calendar or provider is built with options that cannot work.
    """

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"Invalid configuration for {key}: {value!r}")


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def categorize_error(error: Exception) -> ErrorCategory:
    """Get the category of an error."""
    if isinstance(error, CalendarError):
        return error.category
    # dateutil's ParserError is a ValueError
    if isinstance(error, (ValueError, OverflowError)):
        return ErrorCategory.PARSE
    if isinstance(error, (KeyError, AttributeError)):
        return ErrorCategory.CONFIG
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "CalendarError",
    "ValidationError",
    "MissingStartDateError",
    "ConfigError",
    "InvalidConfigError",
    "categorize_error",
]
