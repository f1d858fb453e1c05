# drizzle_gen/models/results.py
"""Result models returned by generators and the source reader."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from drizzle_gen.models.schema import ProjectSchema

ImportMapping = dict[str, list[str]]


class ColumnResult(BaseModel):
    """Encoded column fragment."""

    fragment: str = ""
    imports: ImportMapping = Field(default_factory=dict)
    referenced_tables: list[str] = Field(default_factory=list)


class EnumResult(BaseModel):
    """Generated enum declaration."""

    code: str = ""
    imports: ImportMapping = Field(default_factory=dict)
    error: Optional[str] = None


class HelperResult(BaseModel):
    """Generated helper declaration."""

    code: str = ""
    imports: ImportMapping = Field(default_factory=dict)
    tables: list[str] = Field(default_factory=list)
    error: Optional[str] = None


class TableResult(BaseModel):
    """Generated table declaration."""

    code: str = ""
    imports: ImportMapping = Field(default_factory=dict)
    tables: list[str] = Field(default_factory=list)
    error: Optional[str] = None


class BatchResult(BaseModel):
    """Several entities generated into one consolidated file body."""

    codes: list[str] = Field(default_factory=list)
    imports: ImportMapping = Field(default_factory=dict)
    import_statements: str = ""
    tables: list[str] = Field(default_factory=list)
    errors: Optional[list[str]] = None
    full_file: str = ""


class ProjectFiles(BaseModel):
    """File names per category, relative to their directory."""

    enums: list[str] = Field(default_factory=list)
    helpers: list[str] = Field(default_factory=list)
    tables: list[str] = Field(default_factory=list)
    indexes: list[str] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.enums) + len(self.helpers) + len(self.tables) + len(self.indexes)


class ProjectStructure(BaseModel):
    """Directories and files produced by the project generator."""

    enums_dir: str = ""
    helpers_dir: str = ""
    tables_dir: str = ""
    files: ProjectFiles = Field(default_factory=ProjectFiles)


class ProjectResult(BaseModel):
    """Outcome of writing a project to disk."""

    success: bool
    message: str
    errors: Optional[list[str]] = None
    generated_files: list[str] = Field(default_factory=list)
    structure: ProjectStructure = Field(default_factory=ProjectStructure)


class ReaderMetadata(BaseModel):
    """Metadata collected while reading a project."""

    last_modified: datetime
    total_files: int = 0
    project_path: str


class ReaderResult(BaseModel):
    """Outcome of reading a generated project back into a schema."""

    success: bool
    message: str
    project_schema: Optional[ProjectSchema] = Field(None, alias="schema")
    files: ProjectFiles = Field(default_factory=ProjectFiles)
    errors: Optional[list[str]] = None
    metadata: ReaderMetadata

    model_config = ConfigDict(populate_by_name=True)
