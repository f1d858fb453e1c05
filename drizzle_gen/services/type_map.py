# drizzle_gen/services/type_map.py
"""Bidirectional map between semantic column types and pg-core builders."""

from typing import Optional

TYPE_MAP: dict[str, str] = {
    "serial": "serial",
    "string": "varchar",
    "text": "text",
    "number": "integer",
    "bigint": "bigint",
    "boolean": "boolean",
    "date": "timestamp",
    "json": "jsonb",
    "uuid": "uuid",
    "enum": "pgEnum",
}

# pgEnum is deliberately absent: any builder not listed here is read back
# as a reference to a generated enum.
REVERSE_TYPE_MAP: dict[str, str] = {
    builder: semantic
    for semantic, builder in TYPE_MAP.items()
    if semantic != "enum"
}

ENUM_TYPE = "enum"
VARCHAR_BUILDER = "varchar"


def resolve_builder(semantic_type: str) -> Optional[str]:
    """Return the pg-core builder for a semantic type, case-insensitively."""
    return TYPE_MAP.get(semantic_type.lower())


def resolve_type(builder: str) -> Optional[str]:
    """Return the semantic type for a pg-core builder, or None for enums."""
    return REVERSE_TYPE_MAP.get(builder)
