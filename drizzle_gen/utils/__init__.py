# drizzle_gen/utils/__init__.py
"""Utility modules for drizzle-gen."""

from drizzle_gen.utils.constants import ErrorCode, ERROR_MESSAGES
from drizzle_gen.utils.exceptions import (
    DrizzleGenError,
    ColumnDefinitionError,
    EntityValidationError,
    SourceDecodeError,
    ProjectReadError,
    MaterializationError,
)
from drizzle_gen.utils.casing import pascal_case, snake_case
from drizzle_gen.utils.imports import ImportManager, ImportMap

__all__ = [
    "ErrorCode",
    "ERROR_MESSAGES",
    "DrizzleGenError",
    "ColumnDefinitionError",
    "EntityValidationError",
    "SourceDecodeError",
    "ProjectReadError",
    "MaterializationError",
    "pascal_case",
    "snake_case",
    "ImportManager",
    "ImportMap",
]
