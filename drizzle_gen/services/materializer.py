# drizzle_gen/services/materializer.py
"""Write applied changes back into a generated project."""

import asyncio
import copy
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from drizzle_gen.models.changes import Change, ChangeType, TargetKind
from drizzle_gen.models.results import ProjectResult
from drizzle_gen.models.schema import ProjectSchema
from drizzle_gen.services.project import ProjectGenerator
from drizzle_gen.services.reader import SchemaReader
from drizzle_gen.utils.constants import (
    ENUMS_DIR,
    HELPERS_DIR,
    INDEX_FILE,
    SOURCE_SUFFIX,
    TABLES_DIR,
)
from drizzle_gen.utils.exceptions import MaterializationError

logger = logging.getLogger("schema-policy")

_CATEGORY = {
    TargetKind.ENUM: ("enums", ENUMS_DIR),
    TargetKind.HELPER: ("helpers", HELPERS_DIR),
    TargetKind.TABLE: ("tables", TABLES_DIR),
}

_REMOVALS = {ChangeType.ENUM_REMOVED, ChangeType.HELPER_REMOVED, ChangeType.TABLE_REMOVED}


def _find(entities: list[dict], name: str) -> Optional[dict]:
    return next((e for e in entities if e.get("name") == name), None)


def _put(entities: list[dict], definition: dict) -> None:
    for i, entity in enumerate(entities):
        if entity.get("name") == definition.get("name"):
            entities[i] = definition
            return
    entities.append(definition)


def _detail(change: Change, key: str):
    if not change.details or key not in change.details:
        raise MaterializationError(
            f"Change {change.type.value} on '{change.target.name}' is missing '{key}' in its details"
        )
    return change.details[key]


def _merge_column(entity: dict, change: Change) -> None:
    columns = entity.setdefault("columns", [])
    name = change.target.column
    change_type = change.type

    if change_type in (ChangeType.HELPER_COLUMN_ADDED, ChangeType.TABLE_COLUMN_ADDED):
        _put(columns, copy.deepcopy(_detail(change, "definition")))
        return
    if change_type in (ChangeType.HELPER_COLUMN_REMOVED, ChangeType.TABLE_COLUMN_REMOVED):
        entity["columns"] = [c for c in columns if c.get("name") != name]
        return

    column = _find(columns, name)
    if column is None:
        logger.warning("Column '%s' missing from %s '%s'", name, change.target.kind.value, change.target.name)
        return
    options = dict(column.get("options") or {})

    if change_type == ChangeType.COLUMN_TYPE_CHANGED:
        new_def = _detail(change, "definition")
        new_options = new_def.get("options") or {}
        for key in ("enumValues", "length"):
            options.pop(key, None)
            if key in new_options:
                options[key] = new_options[key]
        column.pop("type", None)
        if "type" in new_def:
            column["type"] = new_def["type"]
    elif change_type == ChangeType.COLUMN_PRIMARY_KEY_CHANGED:
        options["primaryKey"] = _detail(change, "to")
    elif change_type == ChangeType.COLUMN_NOT_NULL_CHANGED:
        options["notNull"] = _detail(change, "to")
    elif change_type == ChangeType.COLUMN_DEFAULT_CHANGED:
        default = _detail(change, "to")
        options.pop("default", None)
        if default is not None:
            options["default"] = default
    column["options"] = options


def merge_changes(schema: ProjectSchema, changes: list[Change]) -> ProjectSchema:
    """Fold applied changes into a schema snapshot.

    Changes are applied in order. Column modifications only touch the
    attribute they describe, so a rejected sibling change on the same
    column is not carried along.

    Args:
        schema: The schema read from disk.
        changes: Changes accepted by the policy gate.

    Returns:
        A new schema with the changes applied.

    Raises:
        MaterializationError: If a change lacks the details needed to
            apply it or the merged schema is invalid.
    """
    state = schema.model_dump(by_alias=True, exclude_none=True)
    for key in ("enums", "helpers", "tables"):
        state.setdefault(key, [])

    for change in changes:
        key, _ = _CATEGORY[change.target.kind]
        entities = state[key]
        name = change.target.name

        if change.type in (ChangeType.ENUM_ADDED, ChangeType.HELPER_ADDED, ChangeType.TABLE_ADDED):
            _put(entities, copy.deepcopy(_detail(change, "definition")))
            continue
        if change.type in _REMOVALS:
            state[key] = [e for e in entities if e.get("name") != name]
            continue

        entity = _find(entities, name)
        if entity is None:
            logger.warning("Cannot apply %s: %s '%s' not found", change.type.value, change.target.kind.value, name)
            continue

        if change.type == ChangeType.ENUM_VALUE_ADDED:
            value = _detail(change, "value")
            if value not in entity["values"]:
                entity["values"].append(value)
        elif change.type == ChangeType.ENUM_VALUE_REMOVED:
            value = _detail(change, "value")
            entity["values"] = [v for v in entity["values"] if v != value]
        elif change.type == ChangeType.TABLE_HELPER_REFERENCE_ADDED:
            ref = _detail(change, "helperReference")
            refs = entity.setdefault("helperReferences", [])
            if ref not in refs:
                refs.append(ref)
        elif change.type == ChangeType.TABLE_HELPER_REFERENCE_REMOVED:
            ref = _detail(change, "helperReference")
            refs = [r for r in entity.get("helperReferences", []) if r != ref]
            entity["helperReferences"] = refs
        elif change.type == ChangeType.TABLE_COMPOSITE_PRIMARY_KEY_CHANGED:
            entity["compositePrimaryKey"] = list(_detail(change, "to"))
        elif change.target.column is not None:
            _merge_column(entity, change)
        else:
            logger.debug("No merge rule for %s", change.type.value)

    for key in ("enums", "helpers", "tables"):
        if not state[key]:
            state[key] = None
    try:
        return ProjectSchema.model_validate(state)
    except ValidationError as e:
        raise MaterializationError(f"Merged schema is invalid: {e}") from e


class SchemaMaterializer:
    """Regenerates a project from its current files plus applied changes."""

    async def materialize(self, project_path: str | Path, changes: list[Change]) -> ProjectResult:
        """Apply changes to the project on disk.

        Args:
            project_path: Root of the generated project.
            changes: Ordered changes accepted by the policy gate.

        Returns:
            The project generator result.

        Raises:
            MaterializationError: If the project cannot be read cleanly or
                regeneration reports errors.
        """
        project_path = Path(project_path)
        read = await SchemaReader(project_path).read_schema()
        if not read.success or read.project_schema is None:
            raise MaterializationError(
                f"Cannot read project before applying changes: {read.message}",
                path=str(project_path),
            )

        merged = merge_changes(read.project_schema, changes).model_copy(
            update={"output_dir": str(project_path), "overwrite": True}
        )
        result = await ProjectGenerator(merged).generate()
        if not result.success:
            raise MaterializationError(
                f"Regeneration failed: {'; '.join(result.errors or [result.message])}",
                path=str(project_path),
            )

        await self._remove_stale_files(project_path, merged, changes)
        logger.info("Applied %d changes to %s", len(changes), project_path)
        return result

    async def _remove_stale_files(
        self,
        project_path: Path,
        schema: ProjectSchema,
        changes: list[Change],
    ) -> None:
        for change in changes:
            if change.type not in _REMOVALS:
                continue
            _, directory = _CATEGORY[change.target.kind]
            path = project_path / directory / f"{change.target.name}{SOURCE_SUFFIX}"
            if path.exists():
                await asyncio.to_thread(path.unlink)
                logger.info("Removed %s", path)

        for key, directory in _CATEGORY.values():
            if getattr(schema, key):
                continue
            index = project_path / directory / INDEX_FILE
            if index.exists():
                await asyncio.to_thread(index.unlink)

        root_index = project_path / INDEX_FILE
        if not (schema.enums or schema.helpers or schema.tables) and root_index.exists():
            await asyncio.to_thread(root_index.unlink)
