"""Configuration management for MealyQA."""

from mealyqa.config.settings import VALID_OUTPUT_FORMATS, MealyQAConfig, load_config

__all__ = [
    "MealyQAConfig",
    "load_config",
    "VALID_OUTPUT_FORMATS",
]
