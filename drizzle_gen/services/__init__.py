# drizzle_gen/services/__init__.py
"""Service modules for drizzle-gen."""

from drizzle_gen.services.type_map import TYPE_MAP, REVERSE_TYPE_MAP, resolve_builder, resolve_type
from drizzle_gen.services.column_codec import resolve_column, encode_column, decode_column
from drizzle_gen.services.generators import (
    generate_enum,
    generate_helper,
    generate_table,
    generate_multiple_helpers,
    generate_multiple_tables,
    generate_complete_schema,
    render_source_file,
)
from drizzle_gen.services.project import ProjectGenerator, generate_project
from drizzle_gen.services.reader import (
    SchemaReader,
    read_schema,
    decode_enum,
    decode_helper,
    decode_table,
)
from drizzle_gen.services.diff import SchemaChangeDetector, compare_schemas
from drizzle_gen.services.materializer import SchemaMaterializer, merge_changes
from drizzle_gen.services.policy import apply_safe_changes, should_apply_change

__all__ = [
    # Types
    "TYPE_MAP",
    "REVERSE_TYPE_MAP",
    "resolve_builder",
    "resolve_type",
    # Codec
    "resolve_column",
    "encode_column",
    "decode_column",
    # Generators
    "generate_enum",
    "generate_helper",
    "generate_table",
    "generate_multiple_helpers",
    "generate_multiple_tables",
    "generate_complete_schema",
    "render_source_file",
    "ProjectGenerator",
    "generate_project",
    # Reader
    "SchemaReader",
    "read_schema",
    "decode_enum",
    "decode_helper",
    "decode_table",
    # Diff and policy
    "SchemaChangeDetector",
    "compare_schemas",
    "SchemaMaterializer",
    "merge_changes",
    "apply_safe_changes",
    "should_apply_change",
]
