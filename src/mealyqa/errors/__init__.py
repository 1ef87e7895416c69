"""MealyQA Error Handling Module.

Provides the exception hierarchy for table construction, definition file
loading and configuration. Algorithmic outcomes (impossible replays,
unresolved states, indistinguishable blocks) are results, not errors.
"""

from mealyqa.errors.base import (
    ConfigValidationError,
    DuplicateTransitionError,
    ErrorCode,
    ErrorContext,
    InvalidSymbolError,
    InvalidTableError,
    MealyQAError,
    TableError,
    TableFileNotFoundError,
    TableLoadError,
    ValidationError,
)

__all__ = [
    # Base exceptions
    "MealyQAError",
    "ErrorCode",
    "ErrorContext",
    # Table errors
    "TableError",
    "InvalidTableError",
    "DuplicateTransitionError",
    "InvalidSymbolError",
    # Loading errors
    "TableLoadError",
    "TableFileNotFoundError",
    # Validation errors
    "ValidationError",
    "ConfigValidationError",
]
