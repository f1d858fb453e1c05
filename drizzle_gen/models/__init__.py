# drizzle_gen/models/__init__.py
"""Data models for drizzle-gen."""

from drizzle_gen.models.schema import (
    ReferenceDefinition,
    ColumnOptions,
    ColumnDefinition,
    ScalarColumn,
    EnumColumn,
    ResolvedColumn,
    EnumDefinition,
    HelperDefinition,
    TableDefinition,
    ProjectSchema,
    load_project_schema,
)
from drizzle_gen.models.changes import (
    ChangeCategory,
    ChangeImpact,
    ChangeType,
    TargetKind,
    ChangeTarget,
    Change,
    ChangeSummary,
    CanApply,
    SchemaComparison,
    ApplyMetadata,
    ApplyResult,
)
from drizzle_gen.models.results import (
    ColumnResult,
    EnumResult,
    HelperResult,
    TableResult,
    BatchResult,
    ProjectFiles,
    ProjectStructure,
    ProjectResult,
    ReaderMetadata,
    ReaderResult,
)

__all__ = [
    "ReferenceDefinition",
    "ColumnOptions",
    "ColumnDefinition",
    "ScalarColumn",
    "EnumColumn",
    "ResolvedColumn",
    "EnumDefinition",
    "HelperDefinition",
    "TableDefinition",
    "ProjectSchema",
    "load_project_schema",
    "ChangeCategory",
    "ChangeImpact",
    "ChangeType",
    "TargetKind",
    "ChangeTarget",
    "Change",
    "ChangeSummary",
    "CanApply",
    "SchemaComparison",
    "ApplyMetadata",
    "ApplyResult",
    "ColumnResult",
    "EnumResult",
    "HelperResult",
    "TableResult",
    "BatchResult",
    "ProjectFiles",
    "ProjectStructure",
    "ProjectResult",
    "ReaderMetadata",
    "ReaderResult",
]
