"""Exception hierarchy for MealyQA.

Only problems with the *input* are raised: a transition table that cannot
be built, a definition file that cannot be read, a bad configuration value.
What the engines discover about a valid machine (an input string that cannot
be replayed, a state with no identifying sequence, a block the tree cannot
split) comes back as part of their result.

Every error carries a code, an optional location, a list of suggestions and
a documentation link, so the CLI can render it the same way regardless of
where it was raised:

    try:
        table = load_table("machine.json")
    except MealyQAError as e:
        print(e)                  # [E202] ... | at file=machine.json
        print(e.format_verbose())
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

DOCS_BASE_URL = "https://mealyqa.dev/docs"

_CATEGORIES = {"1": "table", "2": "loading", "3": "config"}


class ErrorCode(Enum):
    """Error codes, grouped by hundreds.

    E1xx table definition, E2xx definition files, E3xx configuration,
    E999 anything else.
    """

    INVALID_TABLE = "E101"
    DUPLICATE_TRANSITION = "E102"
    INVALID_SYMBOL = "E103"

    TABLE_LOAD_FAILED = "E201"
    TABLE_FILE_NOT_FOUND = "E202"

    INVALID_CONFIG = "E301"

    UNKNOWN = "E999"

    @property
    def category(self) -> str:
        return _CATEGORIES.get(self.value[1], "unknown")


@dataclass
class ErrorContext:
    """Where an error happened: file, machine, state and input symbol.

    Any field may be left out. ``extra`` holds whatever else the raising
    code wants to attach (pydantic error messages, the conflicting
    transition, the accepted values).
    """

    table_name: str | None = None
    state: Any = None
    symbol: str | None = None
    path: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for key in ("table_name", "state", "symbol", "path"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        if self.extra:
            data["extra"] = dict(self.extra)
        return data

    def location(self) -> str:
        """``file=... > table=... > state=... > symbol=...``, or an empty string."""
        segments = []
        if self.path:
            segments.append(f"file={self.path}")
        if self.table_name:
            segments.append(f"table={self.table_name}")
        if self.state is not None:
            segments.append(f"state={self.state}")
        if self.symbol is not None:
            segments.append(f"symbol={self.symbol!r}")
        return " > ".join(segments)


class MealyQAError(Exception):
    """Root of the MealyQA exceptions.

    Subclasses set ``error_code``, ``default_message``,
    ``default_suggestions`` and ``docs_path``; callers usually pass only a
    message and an ErrorContext. Keyword arguments that are not part of the
    signature are merged into ``context.extra``.
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN
    default_message: str = "Unexpected MealyQA failure"
    default_suggestions: list[str] = []
    docs_path: str = "errors"

    def __init__(
        self,
        message: str | None = None,
        error_code: ErrorCode | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
        suggestions: list[str] | None = None,
        **extra_context: Any,
    ) -> None:
        self.message = message or self.default_message
        if error_code is not None:
            self.error_code = error_code
        self.context = context if context is not None else ErrorContext()
        self.context.extra.update(extra_context)
        self.cause = cause
        self._suggestions = suggestions
        super().__init__(self.message)

    @property
    def suggestions(self) -> list[str]:
        source = self.default_suggestions if self._suggestions is None else self._suggestions
        return list(source)

    @property
    def docs_url(self) -> str:
        return f"{DOCS_BASE_URL}/{self.docs_path}"

    def __str__(self) -> str:
        text = f"[{self.error_code.value}] {self.message}"
        where = self.context.location()
        return f"{text} | at {where}" if where else text

    def format_verbose(self) -> str:
        """Multi-line rendering used by ``mealyqa -v``."""
        out = [f"Error [{self.error_code.value}]: {self.message}", ""]
        where = self.context.location()
        if where:
            out.append(f"Location: {where}")
        if self.cause is not None:
            out.append(f"Caused by: {self.cause}")
        if self.suggestions:
            out += ["", "Suggestions:"]
            out += [f"  - {hint}" for hint in self.suggestions]
        out += ["", f"Learn more: {self.docs_url}"]
        return "\n".join(out)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_code": self.error_code.value,
            "error_type": type(self).__name__,
            "message": self.message,
            "suggestions": self.suggestions,
            "docs_url": self.docs_url,
            "context": self.context.to_dict(),
            "cause": None if self.cause is None else str(self.cause),
        }


class TableError(MealyQAError):
    """The transition table definition is not usable.

    Raised while building a table, never while running the engines: once a
    TransitionTable exists, both engines accept it as-is.
    """

    error_code = ErrorCode.INVALID_TABLE
    default_message = "Invalid transition table"
    docs_path = "concepts/transition-table"


class InvalidTableError(TableError):
    """The table structure is malformed (e.g. a transition without a state)."""

    default_message = "Malformed transition table"
    default_suggestions = [
        "Declare a state with state(...) before adding transitions to it",
        "Check that every state maps input symbols to (to_state, output) pairs",
    ]


class DuplicateTransitionError(TableError):
    """A (state, input symbol) pair was given two transitions.

    The machines MealyQA handles are deterministic: at most one transition
    per (state, input symbol).
    """

    error_code = ErrorCode.DUPLICATE_TRANSITION
    default_message = "Duplicate transition for (state, input)"
    default_suggestions = [
        "Remove one of the conflicting transitions",
        "Non-deterministic machines are not supported",
    ]


class InvalidSymbolError(TableError):
    """An input symbol is not exactly one character long.

    Each replay step consumes exactly one character of the input string, so
    multi-character input symbols cannot be addressed.
    """

    error_code = ErrorCode.INVALID_SYMBOL
    default_message = "Input symbols must be exactly one character"
    default_suggestions = [
        "Rename multi-character inputs to single characters",
        "Use a lookup table outside MealyQA to map long names to characters",
    ]


class TableLoadError(MealyQAError):
    """A transition table definition file could not be loaded."""

    error_code = ErrorCode.TABLE_LOAD_FAILED
    default_message = "Failed to load transition table"
    default_suggestions = [
        "Check the file is valid JSON or YAML",
        'Expected shape: {"states": {"1": {"transitions": {"a": {"toState": 2, "output": "z"}}}}}',
        'Or: {"transitions": [{"from": 1, "to": 2, "input": "a", "output": "z"}]}',
    ]
    docs_path = "guides/definition-files"


class TableFileNotFoundError(TableLoadError):
    """The definition file does not exist."""

    error_code = ErrorCode.TABLE_FILE_NOT_FOUND
    default_message = "Transition table file not found"
    default_suggestions = [
        "Check the path passed on the command line",
        "Paths are resolved relative to the current working directory",
    ]


class ValidationError(MealyQAError):
    """A single value was rejected; ``field``, ``value`` and ``expected`` say which."""

    error_code = ErrorCode.INVALID_CONFIG
    default_message = "Validation failed"
    docs_path = "errors/validation"

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        value: Any = None,
        expected: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.field = field
        self.value = value
        self.expected = expected
        super().__init__(message=message, **kwargs)

    def __str__(self) -> str:
        text = super().__str__()
        return f"{text} (field: {self.field})" if self.field else text

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(field=self.field, value=repr(self.value))
        if self.expected:
            data["expected"] = self.expected
        return data


class ConfigValidationError(ValidationError):
    """mealyqa.yaml or a MEALYQA_* environment variable holds a bad value."""

    default_message = "Invalid configuration"
    default_suggestions = [
        "Check mealyqa.yaml syntax with a YAML linter",
        "max_sequence_length must be a positive integer",
        "output_format must be 'text' or 'json'",
    ]
    docs_path = "configuration"
