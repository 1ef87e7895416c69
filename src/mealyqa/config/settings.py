"""Configuration settings and loading."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mealyqa.errors import ConfigValidationError, ErrorContext

VALID_OUTPUT_FORMATS = {"text", "json"}


class MealyQAConfig(BaseSettings):
    """Configuration for MealyQA.

    The engines never read this object; the CLI passes the relevant values
    (e.g. ``max_sequence_length``) to them explicitly.
    """

    model_config = SettingsConfigDict(
        env_prefix="MEALYQA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_sequence_length: int = 3
    output_format: str = "text"
    show_steps: bool = True
    color: bool = True
    verbose: bool = False

    @field_validator("max_sequence_length", mode="after")
    @classmethod
    def validate_max_sequence_length(cls, v: int) -> int:
        if v < 1:
            raise ConfigValidationError(
                message="max_sequence_length must be at least 1",
                field="max_sequence_length",
                value=v,
                expected="positive integer",
            )
        return v

    @field_validator("output_format", mode="before")
    @classmethod
    def validate_output_format(cls, v: str) -> str:
        if v not in VALID_OUTPUT_FORMATS:
            raise ConfigValidationError(
                message=f"Invalid output format: {v!r}. Valid: {sorted(VALID_OUTPUT_FORMATS)}",
                field="output_format",
                value=v,
                context=ErrorContext(extra={"valid_formats": sorted(VALID_OUTPUT_FORMATS)}),
            )
        return v


def load_config(config_path: str | Path | None = None) -> MealyQAConfig:
    """Load configuration from file and environment.

    Priority: CLI args > env vars > config file > defaults
    """
    config_data: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path) as f:
                loaded = yaml.safe_load(f) or {}
            if not isinstance(loaded, dict):
                raise ConfigValidationError(
                    message=f"Configuration must be a YAML object, got {type(loaded).__name__}",
                    context=ErrorContext(path=str(config_path)),
                )
            config_data = loaded

    env_overrides = _get_env_overrides()
    config_data.update(env_overrides)

    return MealyQAConfig(**config_data)


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    env_mappings = {
        "MEALYQA_MAX_SEQUENCE_LENGTH": ("max_sequence_length", int),
        "MEALYQA_OUTPUT_FORMAT": "output_format",
        "MEALYQA_VERBOSE": ("verbose", lambda x: x.lower() in ("true", "1", "yes")),
    }

    for env_key, config_key in env_mappings.items():
        value = os.environ.get(env_key)
        if value is not None:
            if isinstance(config_key, tuple):
                key, converter = config_key
                try:
                    overrides[key] = converter(value)
                except ValueError as e:
                    raise ConfigValidationError(
                        message=f"Invalid value for {env_key}: {value!r}",
                        field=key,
                        value=value,
                        cause=e,
                    ) from e
            else:
                overrides[config_key] = value

    return overrides
