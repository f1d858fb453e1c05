# drizzle_gen/services/column_codec.py
"""Encode column definitions to Drizzle source fragments and back."""

import re

from drizzle_gen.models.results import ColumnResult
from drizzle_gen.models.schema import (
    ColumnDefinition,
    ColumnOptions,
    DefaultValue,
    EnumColumn,
    ResolvedColumn,
    ScalarColumn,
)
from drizzle_gen.services.source_parser import ColumnRef, SqlTemplate, parse_column, quote
from drizzle_gen.services.type_map import (
    ENUM_TYPE,
    VARCHAR_BUILDER,
    resolve_builder,
    resolve_type,
)
from drizzle_gen.utils.casing import pascal_case, snake_case
from drizzle_gen.utils.constants import DRIZZLE_ORM, ENUMS_INDEX, PG_CORE, TABLES_INDEX
from drizzle_gen.utils.exceptions import ColumnDefinitionError, SourceDecodeError
from drizzle_gen.utils.imports import ImportManager

_SQL_CALL = re.compile(r"^sql\.(\w+)\(\)$")
_SQL_TEMPLATE = re.compile(r"^(\w+)\(\)$")


def resolve_column(definition: ColumnDefinition) -> ResolvedColumn:
    """Resolve the type / enumValues pair into a tagged column variant.

    Args:
        definition: The column definition to resolve.

    Returns:
        An ``EnumColumn`` when ``enumValues`` is set, otherwise a ``ScalarColumn``.

    Raises:
        ColumnDefinitionError: If neither a known type nor an enum is given.
    """
    name = definition.name
    options = definition.options

    if options.enum_values:
        return EnumColumn(
            name=name,
            enum_name=options.enum_values,
            not_null=bool(options.not_null),
            primary_key=bool(options.primary_key),
            default=options.default,
            references=options.references,
        )

    if not definition.type:
        raise ColumnDefinitionError(
            name,
            f"Type is required for column '{name}'. "
            "Provide either 'type' property or 'enumValues' in options.",
        )

    builder = resolve_builder(definition.type)
    if builder is None:
        raise ColumnDefinitionError(
            name, f"Unsupported type '{definition.type}' for column '{name}'."
        )
    if definition.type.lower() == ENUM_TYPE:
        raise ColumnDefinitionError(
            name, f"Enum type for column '{name}' requires 'enumValues' in options."
        )

    return ScalarColumn(
        name=name,
        type=definition.type.lower(),
        builder=builder,
        length=options.length if builder == VARCHAR_BUILDER else None,
        not_null=bool(options.not_null),
        primary_key=bool(options.primary_key),
        default=options.default,
        references=options.references,
    )


def _render_default(value: DefaultValue, is_enum: bool, imports: ImportManager) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    match = _SQL_CALL.match(value)
    if match:
        imports.add_import(DRIZZLE_ORM, "sql")
        return f"sql`{match.group(1)}()`"
    if is_enum:
        return quote(pascal_case(value))
    return quote(value)


def encode_column(definition: ColumnDefinition) -> ColumnResult:
    """Render one column as ``name: builder('name')...`` with its imports.

    Qualifiers are appended in a fixed order: primaryKey, notNull,
    default, references.

    Raises:
        ColumnDefinitionError: If the column cannot be resolved.
    """
    column = resolve_column(definition)
    imports = ImportManager()
    tables: list[str] = []

    if isinstance(column, EnumColumn):
        imports.add_import(ENUMS_INDEX, column.enum_name)
        code = f"{column.name}: {column.enum_name}({quote(column.name)})"
    else:
        imports.add_import(PG_CORE, column.builder)
        args = [quote(column.name)]
        if column.length:
            args.append(f"{{ length: {column.length} }}")
        code = f"{column.name}: {column.builder}({', '.join(args)})"

    if column.primary_key:
        code += ".primaryKey()"
    if column.not_null:
        code += ".notNull()"
    if column.default is not None:
        rendered = _render_default(column.default, column.kind == "enum", imports)
        code += f".default({rendered})"
    if column.references:
        ref = column.references
        code += f".references(() => {ref.table}.{ref.column})"
        imports.add_import(TABLES_INDEX, ref.table)
        if ref.table not in tables:
            tables.append(ref.table)

    return ColumnResult(
        fragment=code,
        imports=imports.get_imports(),
        referenced_tables=tables,
    )


def _decode_default(value, is_enum: bool, source: str) -> DefaultValue:
    if isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, SqlTemplate):
        match = _SQL_TEMPLATE.match(value.text)
        if not match:
            raise SourceDecodeError(f"Unsupported sql template default {value.text!r}", source=source)
        return f"sql.{match.group(1)}()"
    if isinstance(value, str):
        return snake_case(value) if is_enum else value
    raise SourceDecodeError("Unsupported default value", source=source)


def decode_column(line: str) -> ColumnDefinition:
    """Read back a single column declaration produced by ``encode_column``.

    Args:
        line: One trimmed declaration such as ``email: varchar('email').notNull()``.

    Returns:
        The recovered column definition. Enum string defaults come back in
        snake_case, whatever casing the original definition used.

    Raises:
        SourceDecodeError: If the line is outside the encoder's grammar.
    """
    source = line.strip().rstrip(",").rstrip()
    decl = parse_column(source)

    semantic_type = resolve_type(decl.builder.name)
    is_enum = semantic_type is None
    options: dict = {}
    if is_enum:
        options["enum_values"] = decl.builder.name

    args = decl.builder.args
    if not args or not isinstance(args[0], str):
        raise SourceDecodeError(
            f"Builder for column '{decl.key}' must start with the column name", source=source
        )
    for extra in args[1:]:
        length = extra.get("length") if isinstance(extra, dict) else None
        if is_enum or not isinstance(length, int) or isinstance(length, bool):
            raise SourceDecodeError(
                f"Unsupported builder argument in column '{decl.key}'", source=source
            )
        options["length"] = length

    for call in decl.chain:
        if call.name == "primaryKey" and not call.args:
            options["primary_key"] = True
        elif call.name == "notNull" and not call.args:
            options["not_null"] = True
        elif call.name == "default" and len(call.args) == 1:
            options["default"] = _decode_default(call.args[0], is_enum, source)
        elif call.name == "references" and len(call.args) == 1 and isinstance(call.args[0], ColumnRef):
            ref = call.args[0]
            options["references"] = {"table": ref.table, "column": ref.column}
        else:
            raise SourceDecodeError(
                f"Unsupported qualifier '.{call.name}()' in column '{decl.key}'", source=source
            )

    return ColumnDefinition(
        name=decl.key,
        type=semantic_type,
        options=ColumnOptions(**options),
    )
