# drizzle_gen/services/generators.py
"""Entity generators: enum, helper and table declarations.

Single-entity generators are atomic: the first failing column aborts the
entity and no partial declaration is produced. The ``generate_multiple_*``
helpers collect one error per failing entity and keep going.
"""

import logging
from typing import Mapping, Optional

from drizzle_gen.models.results import (
    BatchResult,
    EnumResult,
    HelperResult,
    TableResult,
)
from drizzle_gen.models.schema import (
    ColumnDefinition,
    EnumDefinition,
    HelperDefinition,
    TableDefinition,
)
from drizzle_gen.services.column_codec import encode_column
from drizzle_gen.services.source_parser import quote
from drizzle_gen.utils.casing import pascal_case, snake_case
from drizzle_gen.utils.constants import HELPERS_INDEX, PG_CORE
from drizzle_gen.utils.exceptions import ColumnDefinitionError, EntityValidationError
from drizzle_gen.utils.imports import ImportManager

logger = logging.getLogger("schema-generators")

INDENT = "    "
SCHEMA_FILE_HEADER = (
    "// Generated schema file\n"
    "// This file contains all table definitions for the database\n"
)


def render_source_file(imports: Mapping[str, list[str]], code: str) -> str:
    """Assemble a complete ``.ts`` file: imports, blank line, declaration."""
    return f"{ImportManager(imports)}\n\n{code}\n"


def _encode_columns(
    columns: list[ColumnDefinition],
    imports: ImportManager,
    tables: list[str],
) -> list[str]:
    """Encode columns in order, stopping at the first failure."""
    fragments = []
    for column in columns:
        try:
            result = encode_column(column)
        except ColumnDefinitionError as e:
            raise EntityValidationError(f"Error in column '{column.name}': {e.message}") from e
        fragments.append(f"{INDENT}{result.fragment}")
        imports.merge(result.imports)
        for table in result.referenced_tables:
            if table not in tables:
                tables.append(table)
    return fragments


def generate_enum(definition: EnumDefinition) -> EnumResult:
    """Generate a ``pgEnum`` declaration.

    The database name is the snake_case enum name and every value is
    rendered in PascalCase, in declared order.
    """
    if not definition.name or not definition.values:
        return EnumResult(error="Enum name and values are mandatory.")

    values = ", ".join(quote(pascal_case(v)) for v in definition.values)
    code = (
        f"export const {definition.name} = "
        f"pgEnum({quote(snake_case(definition.name))}, [{values}] as const);"
    )
    return EnumResult(code=code, imports={PG_CORE: ["pgEnum"]})


def generate_helper(definition: HelperDefinition) -> HelperResult:
    """Generate a helper object whose columns can be spread into tables."""
    if not definition.name or not definition.name.strip():
        return HelperResult(error="Helper name is required.")
    if not definition.columns:
        return HelperResult(error="At least one column is required for a helper.")

    imports = ImportManager()
    tables: list[str] = []
    try:
        fragments = _encode_columns(definition.columns, imports, tables)
    except EntityValidationError as e:
        return HelperResult(error=e.message)

    code = f"export const {definition.name} = {{\n" + ",\n".join(fragments) + "\n};"
    return HelperResult(code=code, imports=imports.get_imports(), tables=tables)


def generate_table(definition: TableDefinition) -> TableResult:
    """Generate a ``pgTable`` declaration.

    Columns come first, then one ``...Helper`` spread per helper reference.
    The database name defaults to snake_case(name) while the exported
    binding is the plain lower-cased name. A composite primary key is only
    rendered when it lists at least two columns.
    """
    if not definition.name or not definition.name.strip():
        return TableResult(error="Table name is required.")

    helper_refs = definition.helper_references or []
    if not definition.columns and not helper_refs:
        return TableResult(error="Table must have at least one column or helper reference.")

    imports = ImportManager()
    imports.add_import(PG_CORE, "pgTable")
    tables: list[str] = []
    try:
        entries = _encode_columns(definition.columns, imports, tables)
    except EntityValidationError as e:
        return TableResult(error=e.message)

    if helper_refs:
        imports.add_imports(HELPERS_INDEX, helper_refs)
        entries.extend(f"{INDENT}...{helper}" for helper in helper_refs)

    db_name = definition.db_name or snake_case(definition.name)
    variable = definition.variable_name
    structure = "{\n" + ",\n".join(entries) + "\n}"

    constraint = ""
    primary_key = definition.effective_primary_key
    if primary_key:
        imports.add_import(PG_CORE, "primaryKey")
        members = ", ".join(f"{variable}.{col}" for col in primary_key)
        constraint = (
            f", ({variable}) => ({{\n"
            f"{INDENT}compositePK: primaryKey({{ columns: [{members}] }})\n"
            "})"
        )

    code = f"export const {variable} = pgTable({quote(db_name)}, {structure}{constraint});"
    return TableResult(code=code, imports=imports.get_imports(), tables=tables)


def _collect(kind: str, definitions, generate) -> BatchResult:
    imports = ImportManager()
    tables: list[str] = []
    codes: list[str] = []
    errors: list[str] = []

    for definition in definitions:
        result = generate(definition)
        if result.error:
            errors.append(f"Error in {kind} '{definition.name}': {result.error}")
            continue
        codes.append(result.code)
        imports.merge(result.imports)
        for table in result.tables:
            if table not in tables:
                tables.append(table)

    if errors:
        logger.warning("Skipped %d %s definition(s): %s", len(errors), kind, errors)

    statements = str(imports)
    return BatchResult(
        codes=codes,
        imports=imports.get_imports(),
        import_statements=statements,
        tables=tables,
        errors=errors or None,
        full_file=f"{statements}\n\n" + "\n\n".join(codes),
    )


def generate_multiple_helpers(definitions: list[HelperDefinition]) -> BatchResult:
    """Generate several helpers and consolidate their imports."""
    return _collect("helper", definitions, generate_helper)


def generate_multiple_tables(definitions: list[TableDefinition]) -> BatchResult:
    """Generate several tables and consolidate their imports."""
    return _collect("table", definitions, generate_table)


def generate_complete_schema(
    definitions: list[TableDefinition],
    additional_imports: Optional[Mapping[str, list[str]]] = None,
) -> BatchResult:
    """Generate a single schema file holding every table."""
    result = generate_multiple_tables(definitions)

    imports = ImportManager(result.imports)
    imports.merge(additional_imports or {})
    statements = str(imports)

    return result.model_copy(update={
        "imports": imports.get_imports(),
        "import_statements": statements,
        "full_file": f"{SCHEMA_FILE_HEADER}\n{statements}\n\n" + "\n\n".join(result.codes),
    })
