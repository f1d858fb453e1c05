# drizzle_gen/models/changes.py
"""Schema comparison and change-application models."""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChangeCategory(str, Enum):
    """Change category enumeration."""

    ADDITION = "addition"
    MODIFICATION = "modification"
    REMOVAL = "removal"


class ChangeImpact(str, Enum):
    """How dangerous a change is to apply automatically."""

    SAFE = "safe"
    WARNING = "warning"
    BREAKING = "breaking"


class ChangeType(str, Enum):
    """Change type enumeration."""

    ENUM_ADDED = "enum_added"
    ENUM_REMOVED = "enum_removed"
    ENUM_MODIFIED = "enum_modified"
    ENUM_VALUE_ADDED = "enum_value_added"
    ENUM_VALUE_REMOVED = "enum_value_removed"
    HELPER_ADDED = "helper_added"
    HELPER_REMOVED = "helper_removed"
    HELPER_MODIFIED = "helper_modified"
    HELPER_COLUMN_ADDED = "helper_column_added"
    HELPER_COLUMN_REMOVED = "helper_column_removed"
    HELPER_COLUMN_MODIFIED = "helper_column_modified"
    TABLE_ADDED = "table_added"
    TABLE_REMOVED = "table_removed"
    TABLE_MODIFIED = "table_modified"
    TABLE_COLUMN_ADDED = "table_column_added"
    TABLE_COLUMN_REMOVED = "table_column_removed"
    TABLE_COLUMN_MODIFIED = "table_column_modified"
    TABLE_HELPER_REFERENCE_ADDED = "table_helper_reference_added"
    TABLE_HELPER_REFERENCE_REMOVED = "table_helper_reference_removed"
    TABLE_COMPOSITE_PRIMARY_KEY_CHANGED = "table_composite_primary_key_changed"
    COLUMN_TYPE_CHANGED = "column_type_changed"
    COLUMN_PRIMARY_KEY_CHANGED = "column_primary_key_changed"
    COLUMN_NOT_NULL_CHANGED = "column_not_null_changed"
    COLUMN_DEFAULT_CHANGED = "column_default_changed"
    COLUMN_REFERENCES_CHANGED = "column_references_changed"


class TargetKind(str, Enum):
    """Kind of entity a change applies to."""

    ENUM = "enum"
    HELPER = "helper"
    TABLE = "table"


class ChangeTarget(BaseModel):
    """Entity (and optionally column) touched by a change."""

    kind: TargetKind
    name: str
    column: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class Change(BaseModel):
    """A single classified difference between two schema snapshots."""

    type: ChangeType
    category: ChangeCategory
    impact: ChangeImpact
    description: str
    target: ChangeTarget
    details: Optional[dict[str, Any]] = None

    model_config = ConfigDict(frozen=True)


class ChangeSummary(BaseModel):
    """Change counts by category, impact and type."""

    total_changes: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)
    by_impact: dict[str, int] = Field(default_factory=dict)
    by_type: dict[str, int] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


class CanApply(BaseModel):
    """Whether at least one change of each impact tier exists."""

    safe: bool = False
    with_warnings: bool = False
    with_breaking: bool = False

    model_config = ConfigDict(frozen=True)


class SchemaComparison(BaseModel):
    """Full output of comparing two schema snapshots."""

    changes: list[Change] = Field(default_factory=list)
    summary: ChangeSummary = Field(default_factory=ChangeSummary)
    recommendations: list[str] = Field(default_factory=list)
    can_apply: CanApply = Field(default_factory=CanApply)

    model_config = ConfigDict(frozen=True)


class ApplyMetadata(BaseModel):
    """Bookkeeping for a policy gate run."""

    total_changes: int
    applied_count: int
    rejected_count: int
    dry_run: bool
    error: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class ApplyResult(BaseModel):
    """Partition of a comparison into applied and rejected changes."""

    applied: list[Change] = Field(default_factory=list)
    rejected: list[Change] = Field(default_factory=list)
    metadata: ApplyMetadata

    model_config = ConfigDict(frozen=True)
