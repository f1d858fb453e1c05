# drizzle_gen/models/schema.py
"""Schema definition models: enums, helpers, tables and their columns."""

import json
from pathlib import Path
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

DefaultValue = Union[bool, int, float, str]


class ReferenceDefinition(BaseModel):
    """Foreign key target of a column."""

    table: str
    column: str

    model_config = ConfigDict(frozen=True)


class ColumnOptions(BaseModel):
    """Column configuration options as written in a schema description."""

    not_null: Optional[bool] = Field(None, alias="notNull")
    primary_key: Optional[bool] = Field(None, alias="primaryKey")
    default: Optional[DefaultValue] = None
    length: Optional[int] = None
    enum_values: Optional[str] = Field(None, alias="enumValues")
    references: Optional[ReferenceDefinition] = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def is_empty(self) -> bool:
        return not self.model_dump(exclude_none=True)


class ColumnDefinition(BaseModel):
    """Column definition input.

    Either ``type`` or ``options.enum_values`` must be resolvable; when both
    are present the enum wins. Use ``resolve_column`` to obtain the tagged
    variant the encoder works with.
    """

    name: str
    type: Optional[str] = None
    options: ColumnOptions = Field(default_factory=ColumnOptions)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def enum_name(self) -> Optional[str]:
        return self.options.enum_values or None


class ScalarColumn(BaseModel):
    """Column rendered through a pg-core builder such as ``varchar``."""

    kind: Literal["scalar"] = "scalar"
    name: str
    type: str
    builder: str
    length: Optional[int] = None
    not_null: bool = False
    primary_key: bool = False
    default: Optional[DefaultValue] = None
    references: Optional[ReferenceDefinition] = None

    model_config = ConfigDict(frozen=True)


class EnumColumn(BaseModel):
    """Column rendered through a generated ``pgEnum`` builder."""

    kind: Literal["enum"] = "enum"
    name: str
    enum_name: str
    not_null: bool = False
    primary_key: bool = False
    default: Optional[DefaultValue] = None
    references: Optional[ReferenceDefinition] = None

    model_config = ConfigDict(frozen=True)


ResolvedColumn = Annotated[Union[ScalarColumn, EnumColumn], Field(discriminator="kind")]


class EnumDefinition(BaseModel):
    """Enum definition model."""

    name: str
    values: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class HelperDefinition(BaseModel):
    """Reusable, named group of columns spread into tables."""

    name: str
    columns: list[ColumnDefinition] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class TableDefinition(BaseModel):
    """Table definition model."""

    name: str
    db_name: Optional[str] = Field(None, alias="dbName")
    columns: list[ColumnDefinition] = Field(default_factory=list)
    helper_references: Optional[list[str]] = Field(None, alias="helperReferences")
    composite_primary_key: Optional[list[str]] = Field(None, alias="compositePrimaryKey")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def variable_name(self) -> str:
        """Identifier of the table binding in generated source."""
        return self.name.lower()

    @property
    def effective_primary_key(self) -> list[str]:
        """Composite key members that are actually rendered."""
        keys = self.composite_primary_key or []
        return list(keys) if len(keys) > 1 else []


class ProjectSchema(BaseModel):
    """Snapshot of a complete project description."""

    output_dir: str = Field(..., alias="outputDir")
    enums: Optional[list[EnumDefinition]] = None
    helpers: Optional[list[HelperDefinition]] = None
    tables: Optional[list[TableDefinition]] = None
    overwrite: Optional[bool] = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Dump with the camelCase keys of the description format."""
        return self.model_dump(by_alias=True, exclude_none=True)


def load_project_schema(path: str | Path) -> ProjectSchema:
    """Load a JSON schema description file.

    Args:
        path: Path to the JSON file.

    Returns:
        The parsed project schema.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return ProjectSchema.model_validate(data)
