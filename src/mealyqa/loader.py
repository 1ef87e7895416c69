"""JSON/YAML transition table loader.

Two document shapes are accepted. Nested, keyed by state:

```json
{
  "name": "reference",
  "states": {
    "1": {"transitions": {"a": {"toState": 2, "output": "z"}}},
    "2": {"transitions": {"b": {"toState": 3, "output": "t"},
                          "a": {"toState": 4, "output": "x"}}}
  }
}
```

Flat, one entry per transition:

```yaml
name: reference
transitions:
  - {from: 1, to: 2, input: a, output: z}
  - {from: 2, to: 3, input: b, output: t}
```

Files ending in ``.yaml``/``.yml`` are parsed with PyYAML, anything else as
JSON. State keys made only of digits become ints. Symbol order within a
state follows the document.

Usage:
    >>> from mealyqa.loader import load_table
    >>> table = load_table("machines/reference.json")
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from mealyqa.core.table import StateId, TableBuilder, TransitionTable
from mealyqa.errors import ErrorContext, TableFileNotFoundError, TableLoadError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}

_INTEGER_KEY = re.compile(r"-?[0-9]+")

StateKey = Union[int, str]


def _as_text(value: Any) -> Any:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class TransitionTarget(BaseModel):
    """Destination of one transition in the nested shape."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    to_state: StateKey = Field(alias="toState")
    output: str

    @field_validator("output", mode="before")
    @classmethod
    def coerce_output(cls, v: Any) -> Any:
        return _as_text(v)


class StateDefinition(BaseModel):
    """Outgoing transitions of one state in the nested shape."""

    model_config = ConfigDict(extra="forbid")

    transitions: dict[str, TransitionTarget] = Field(default_factory=dict)

    @field_validator("transitions", mode="before")
    @classmethod
    def coerce_symbols(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {_as_text(symbol): target for symbol, target in v.items()}
        return v


class FlatTransition(BaseModel):
    """One transition in the flat shape."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    from_state: StateKey = Field(alias="from")
    to_state: StateKey = Field(alias="to")
    input: str
    output: str

    @field_validator("input", "output", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _as_text(v)


class TableDocument(BaseModel):
    """A complete definition document."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    description: str | None = None
    states: dict[StateKey, StateDefinition] | None = None
    transitions: list[FlatTransition] | None = None

    @model_validator(mode="after")
    def check_one_shape(self) -> TableDocument:
        if self.states is None and self.transitions is None:
            raise ValueError("document must define either 'states' or 'transitions'")
        if self.states is not None and self.transitions is not None:
            raise ValueError("document must not define both 'states' and 'transitions'")
        return self


def coerce_state(key: StateKey) -> StateId:
    """Turn digit-only string keys into ints, leave anything else unchanged."""
    if isinstance(key, str) and _INTEGER_KEY.fullmatch(key.strip()):
        return int(key)
    return key


def load_table(path: str | Path) -> TransitionTable:
    """Load a TransitionTable from a JSON or YAML file.

    Args:
        path: Definition file path.

    Returns:
        The table; its name is the document's ``name`` or the file stem.

    Raises:
        TableFileNotFoundError: If ``path`` does not exist.
        TableLoadError: If the file cannot be parsed or has the wrong shape.
        TableError: If the document describes an invalid table.
    """
    path = Path(path)

    if not path.exists():
        raise TableFileNotFoundError(
            f"Transition table file not found: {path}",
            context=ErrorContext(path=str(path)),
        )

    try:
        with open(path, encoding="utf-8") as f:
            if path.suffix.lower() in YAML_SUFFIXES:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise TableLoadError(
            f"Failed to parse {path.name}: {e}",
            context=ErrorContext(path=str(path)),
            cause=e,
        ) from e

    table = load_table_from_dict(data, default_name=path.stem, path=str(path))
    logger.info(f"Loaded {table!r} from {path}")
    return table


def load_table_from_dict(
    data: Any,
    default_name: str = "machine",
    path: str | None = None,
) -> TransitionTable:
    """Build a TransitionTable from an already parsed document.

    Raises:
        TableLoadError: If ``data`` does not match either document shape.
        TableError: If the described table is invalid.
    """
    if not isinstance(data, dict):
        raise TableLoadError(
            f"Definition must be an object, got {type(data).__name__}",
            context=ErrorContext(path=path),
        )

    try:
        document = TableDocument.model_validate(data)
    except PydanticValidationError as e:
        raise TableLoadError(
            f"Invalid transition table definition: {e.error_count()} error(s)",
            context=ErrorContext(path=path, extra={"errors": [err["msg"] for err in e.errors()]}),
            cause=e,
        ) from e

    name = document.name or default_name
    builder = TableBuilder(name=name)

    if document.states is not None:
        for key, definition in document.states.items():
            builder.state(coerce_state(key))
            for symbol, target in definition.transitions.items():
                builder.on_input(symbol, coerce_state(target.to_state), target.output)
    else:
        for entry in document.transitions or []:
            builder.transition(
                coerce_state(entry.from_state),
                entry.input,
                coerce_state(entry.to_state),
                entry.output,
            )

    return builder.build()
