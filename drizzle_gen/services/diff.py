# drizzle_gen/services/diff.py
"""Schema comparison: detect, classify and summarise changes.

Traversal order is fixed so that two runs over the same snapshots give the
same change list: enums, helpers, tables; inside each category additions,
then removals, then modifications of name-matched pairs (in the order of
the new snapshot).
"""

import logging
from typing import Any, Optional

from drizzle_gen.models.changes import (
    CanApply,
    Change,
    ChangeCategory,
    ChangeImpact,
    ChangeSummary,
    ChangeTarget,
    ChangeType,
    SchemaComparison,
    TargetKind,
)
from drizzle_gen.models.schema import (
    ColumnDefinition,
    EnumDefinition,
    HelperDefinition,
    ProjectSchema,
    TableDefinition,
)

logger = logging.getLogger("schema-diff")

NOT_NULL_ADDED_SUFFIX = " (NOT NULL - requires default or data migration)"

# Default category and impact per change type.
CLASSIFICATION: dict[ChangeType, tuple[ChangeCategory, ChangeImpact]] = {
    ChangeType.ENUM_ADDED: (ChangeCategory.ADDITION, ChangeImpact.SAFE),
    ChangeType.ENUM_REMOVED: (ChangeCategory.REMOVAL, ChangeImpact.BREAKING),
    ChangeType.ENUM_VALUE_ADDED: (ChangeCategory.ADDITION, ChangeImpact.SAFE),
    ChangeType.ENUM_VALUE_REMOVED: (ChangeCategory.REMOVAL, ChangeImpact.BREAKING),
    ChangeType.HELPER_ADDED: (ChangeCategory.ADDITION, ChangeImpact.SAFE),
    ChangeType.HELPER_REMOVED: (ChangeCategory.REMOVAL, ChangeImpact.WARNING),
    ChangeType.HELPER_COLUMN_ADDED: (ChangeCategory.ADDITION, ChangeImpact.SAFE),
    ChangeType.HELPER_COLUMN_REMOVED: (ChangeCategory.REMOVAL, ChangeImpact.WARNING),
    ChangeType.TABLE_ADDED: (ChangeCategory.ADDITION, ChangeImpact.SAFE),
    ChangeType.TABLE_REMOVED: (ChangeCategory.REMOVAL, ChangeImpact.BREAKING),
    ChangeType.TABLE_COLUMN_ADDED: (ChangeCategory.ADDITION, ChangeImpact.SAFE),
    ChangeType.TABLE_COLUMN_REMOVED: (ChangeCategory.REMOVAL, ChangeImpact.BREAKING),
    ChangeType.TABLE_HELPER_REFERENCE_ADDED: (ChangeCategory.ADDITION, ChangeImpact.SAFE),
    ChangeType.TABLE_HELPER_REFERENCE_REMOVED: (ChangeCategory.REMOVAL, ChangeImpact.WARNING),
    ChangeType.TABLE_COMPOSITE_PRIMARY_KEY_CHANGED: (ChangeCategory.MODIFICATION, ChangeImpact.BREAKING),
    ChangeType.COLUMN_TYPE_CHANGED: (ChangeCategory.MODIFICATION, ChangeImpact.BREAKING),
    ChangeType.COLUMN_PRIMARY_KEY_CHANGED: (ChangeCategory.MODIFICATION, ChangeImpact.BREAKING),
    ChangeType.COLUMN_NOT_NULL_CHANGED: (ChangeCategory.MODIFICATION, ChangeImpact.SAFE),
    ChangeType.COLUMN_DEFAULT_CHANGED: (ChangeCategory.MODIFICATION, ChangeImpact.SAFE),
}


def effective_type(column: ColumnDefinition) -> str:
    """Type used for comparison: ``enum(<Name>)`` or the lower-cased type."""
    if column.enum_name:
        return f"enum({column.enum_name})"
    return (column.type or "").lower()


def _dump(definition) -> dict:
    return definition.model_dump(by_alias=True, exclude_none=True)


def _same_default(current: Any, new: Any) -> bool:
    return type(current) is type(new) and current == new


class SchemaChangeDetector:
    """Compares two schema snapshots and classifies every difference."""

    def compare_schemas(self, current: ProjectSchema, new: ProjectSchema) -> SchemaComparison:
        """Compare two schemas and detect changes.

        Args:
            current: The schema currently on disk.
            new: The desired schema.

        Returns:
            The comparison with changes, summary, recommendations and
            per-tier applicability flags.
        """
        changes: list[Change] = []
        changes.extend(self._compare_enums(current.enums or [], new.enums or []))
        changes.extend(self._compare_helpers(current.helpers or [], new.helpers or []))
        changes.extend(self._compare_tables(current.tables or [], new.tables or []))

        summary = self.summarize(changes)
        logger.info(
            "Detected %d changes (safe=%d, warning=%d, breaking=%d)",
            summary.total_changes,
            summary.by_impact[ChangeImpact.SAFE.value],
            summary.by_impact[ChangeImpact.WARNING.value],
            summary.by_impact[ChangeImpact.BREAKING.value],
        )

        return SchemaComparison(
            changes=changes,
            summary=summary,
            recommendations=self.recommend(changes),
            can_apply=CanApply(
                safe=any(c.impact == ChangeImpact.SAFE for c in changes),
                with_warnings=any(c.impact == ChangeImpact.WARNING for c in changes),
                with_breaking=any(c.impact == ChangeImpact.BREAKING for c in changes),
            ),
        )

    # -- change construction -------------------------------------------

    @staticmethod
    def _change(
        change_type: ChangeType,
        description: str,
        target: ChangeTarget,
        details: Optional[dict] = None,
        impact: Optional[ChangeImpact] = None,
    ) -> Change:
        category, default_impact = CLASSIFICATION[change_type]
        return Change(
            type=change_type,
            category=category,
            impact=impact or default_impact,
            description=description,
            target=target,
            details=details,
        )

    # -- enums ---------------------------------------------------------

    def _compare_enums(
        self,
        current: list[EnumDefinition],
        new: list[EnumDefinition],
    ) -> list[Change]:
        changes = []
        current_by_name = {e.name: e for e in current}
        new_names = {e.name for e in new}

        for enum in new:
            if enum.name not in current_by_name:
                changes.append(self._change(
                    ChangeType.ENUM_ADDED,
                    f"Added enum '{enum.name}' with values: {', '.join(enum.values)}",
                    ChangeTarget(kind=TargetKind.ENUM, name=enum.name),
                    {"values": list(enum.values), "definition": _dump(enum)},
                ))

        for enum in current:
            if enum.name not in new_names:
                changes.append(self._change(
                    ChangeType.ENUM_REMOVED,
                    f"Removed enum '{enum.name}'",
                    ChangeTarget(kind=TargetKind.ENUM, name=enum.name),
                ))

        for enum in new:
            existing = current_by_name.get(enum.name)
            if existing is not None:
                changes.extend(self._compare_enum_values(existing, enum))

        return changes

    def _compare_enum_values(self, current: EnumDefinition, new: EnumDefinition) -> list[Change]:
        changes = []
        target = ChangeTarget(kind=TargetKind.ENUM, name=new.name)
        current_values = set(current.values)
        new_values = set(new.values)

        for value in new.values:
            if value not in current_values:
                changes.append(self._change(
                    ChangeType.ENUM_VALUE_ADDED,
                    f"Added value '{value}' to enum '{new.name}'",
                    target,
                    {"value": value},
                ))
        for value in current.values:
            if value not in new_values:
                changes.append(self._change(
                    ChangeType.ENUM_VALUE_REMOVED,
                    f"Removed value '{value}' from enum '{new.name}'",
                    target,
                    {"value": value},
                ))
        return changes

    # -- helpers -------------------------------------------------------

    def _compare_helpers(
        self,
        current: list[HelperDefinition],
        new: list[HelperDefinition],
    ) -> list[Change]:
        changes = []
        current_by_name = {h.name: h for h in current}
        new_names = {h.name for h in new}

        for helper in new:
            if helper.name not in current_by_name:
                changes.append(self._change(
                    ChangeType.HELPER_ADDED,
                    f"Added helper '{helper.name}' with {len(helper.columns)} columns",
                    ChangeTarget(kind=TargetKind.HELPER, name=helper.name),
                    {"definition": _dump(helper)},
                ))

        for helper in current:
            if helper.name not in new_names:
                changes.append(self._change(
                    ChangeType.HELPER_REMOVED,
                    f"Removed helper '{helper.name}'",
                    ChangeTarget(kind=TargetKind.HELPER, name=helper.name),
                ))

        for helper in new:
            existing = current_by_name.get(helper.name)
            if existing is not None:
                changes.extend(self._compare_columns(
                    existing.columns, helper.columns, TargetKind.HELPER, helper.name
                ))

        return changes

    # -- tables --------------------------------------------------------

    def _compare_tables(
        self,
        current: list[TableDefinition],
        new: list[TableDefinition],
    ) -> list[Change]:
        changes = []
        current_by_name = {t.name: t for t in current}
        new_names = {t.name for t in new}

        for table in new:
            if table.name not in current_by_name:
                changes.append(self._change(
                    ChangeType.TABLE_ADDED,
                    f"Added table '{table.name}' with {len(table.columns)} columns",
                    ChangeTarget(kind=TargetKind.TABLE, name=table.name),
                    {"definition": _dump(table)},
                ))

        for table in current:
            if table.name not in new_names:
                changes.append(self._change(
                    ChangeType.TABLE_REMOVED,
                    f"Removed table '{table.name}'",
                    ChangeTarget(kind=TargetKind.TABLE, name=table.name),
                ))

        for table in new:
            existing = current_by_name.get(table.name)
            if existing is not None:
                changes.extend(self._compare_columns(
                    existing.columns, table.columns, TargetKind.TABLE, table.name
                ))
                changes.extend(self._compare_helper_references(existing, table))
                changes.extend(self._compare_composite_keys(existing, table))

        return changes

    def _compare_helper_references(
        self,
        current: TableDefinition,
        new: TableDefinition,
    ) -> list[Change]:
        changes = []
        target = ChangeTarget(kind=TargetKind.TABLE, name=new.name)
        current_refs = list(dict.fromkeys(current.helper_references or []))
        new_refs = list(dict.fromkeys(new.helper_references or []))

        for ref in new_refs:
            if ref not in current_refs:
                changes.append(self._change(
                    ChangeType.TABLE_HELPER_REFERENCE_ADDED,
                    f"Added helper reference '{ref}' to table '{new.name}'",
                    target,
                    {"helperReference": ref},
                ))
        for ref in current_refs:
            if ref not in new_refs:
                changes.append(self._change(
                    ChangeType.TABLE_HELPER_REFERENCE_REMOVED,
                    f"Removed helper reference '{ref}' from table '{new.name}'",
                    target,
                    {"helperReference": ref},
                ))
        return changes

    def _compare_composite_keys(
        self,
        current: TableDefinition,
        new: TableDefinition,
    ) -> list[Change]:
        current_key = current.effective_primary_key
        new_key = new.effective_primary_key
        if set(current_key) == set(new_key):
            return []
        return [self._change(
            ChangeType.TABLE_COMPOSITE_PRIMARY_KEY_CHANGED,
            f"Changed composite primary key for table '{new.name}'",
            ChangeTarget(kind=TargetKind.TABLE, name=new.name),
            {"from": current_key, "to": new_key},
        )]

    # -- columns -------------------------------------------------------

    def _compare_columns(
        self,
        current: list[ColumnDefinition],
        new: list[ColumnDefinition],
        kind: TargetKind,
        owner: str,
    ) -> list[Change]:
        changes = []
        current_by_name = {c.name: c for c in current}
        new_names = {c.name for c in new}
        is_table = kind == TargetKind.TABLE

        for column in new:
            if column.name in current_by_name:
                continue
            target = ChangeTarget(kind=kind, name=owner, column=column.name)
            details = {"definition": _dump(column)}
            if not is_table:
                changes.append(self._change(
                    ChangeType.HELPER_COLUMN_ADDED,
                    f"Added column '{column.name}' to helper '{owner}'",
                    target,
                    details,
                ))
            elif column.options.not_null:
                changes.append(self._change(
                    ChangeType.TABLE_COLUMN_ADDED,
                    f"Added column '{column.name}' to table '{owner}'{NOT_NULL_ADDED_SUFFIX}",
                    target,
                    details,
                    impact=ChangeImpact.WARNING,
                ))
            else:
                changes.append(self._change(
                    ChangeType.TABLE_COLUMN_ADDED,
                    f"Added column '{column.name}' to table '{owner}'",
                    target,
                    details,
                ))

        for column in current:
            if column.name not in new_names:
                changes.append(self._change(
                    ChangeType.TABLE_COLUMN_REMOVED if is_table else ChangeType.HELPER_COLUMN_REMOVED,
                    f"Removed column '{column.name}' from {kind.value} '{owner}'",
                    ChangeTarget(kind=kind, name=owner, column=column.name),
                ))

        for column in new:
            existing = current_by_name.get(column.name)
            if existing is not None:
                changes.extend(self._compare_column(existing, column, kind, owner))

        return changes

    def _compare_column(
        self,
        current: ColumnDefinition,
        new: ColumnDefinition,
        kind: TargetKind,
        owner: str,
    ) -> list[Change]:
        changes = []
        target = ChangeTarget(kind=kind, name=owner, column=new.name)
        where = f"in {kind.value} '{owner}'"
        definition = _dump(new)

        old_type, new_type = effective_type(current), effective_type(new)
        if old_type != new_type:
            changes.append(self._change(
                ChangeType.COLUMN_TYPE_CHANGED,
                f"Changed column '{new.name}' type from '{old_type}' to '{new_type}' {where}",
                target,
                {"from": old_type, "to": new_type, "definition": definition},
            ))

        old_pk, new_pk = bool(current.options.primary_key), bool(new.options.primary_key)
        if old_pk != new_pk:
            action = "Added" if new_pk else "Removed"
            changes.append(self._change(
                ChangeType.COLUMN_PRIMARY_KEY_CHANGED,
                f"{action} primary key on column '{new.name}' {where}",
                target,
                {"from": old_pk, "to": new_pk, "definition": definition},
            ))

        old_nn, new_nn = bool(current.options.not_null), bool(new.options.not_null)
        if old_nn != new_nn:
            action = "Added" if new_nn else "Removed"
            changes.append(self._change(
                ChangeType.COLUMN_NOT_NULL_CHANGED,
                f"{action} NOT NULL constraint on column '{new.name}' {where}",
                target,
                {"from": old_nn, "to": new_nn, "definition": definition},
                impact=ChangeImpact.WARNING if new_nn else ChangeImpact.SAFE,
            ))

        old_default, new_default = current.options.default, new.options.default
        if not _same_default(old_default, new_default):
            changes.append(self._change(
                ChangeType.COLUMN_DEFAULT_CHANGED,
                f"Changed default value for column '{new.name}' {where}",
                target,
                {"from": old_default, "to": new_default, "definition": definition},
            ))

        return changes

    # -- reporting -----------------------------------------------------

    @staticmethod
    def summarize(changes: list[Change]) -> ChangeSummary:
        """Count changes by category, impact and type.

        Every category and impact key is present, even with a zero count.
        """
        by_type: dict[str, int] = {}
        for change in changes:
            by_type[change.type.value] = by_type.get(change.type.value, 0) + 1

        return ChangeSummary(
            total_changes=len(changes),
            by_category={
                category.value: sum(1 for c in changes if c.category == category)
                for category in ChangeCategory
            },
            by_impact={
                impact.value: sum(1 for c in changes if c.impact == impact)
                for impact in ChangeImpact
            },
            by_type=by_type,
        )

    @staticmethod
    def recommend(changes: list[Change]) -> list[str]:
        """Build rule-based recommendations for a change list."""
        recommendations = []
        breaking = [c for c in changes if c.impact == ChangeImpact.BREAKING]
        warnings = [c for c in changes if c.impact == ChangeImpact.WARNING]
        safe = [c for c in changes if c.impact == ChangeImpact.SAFE]

        if breaking:
            recommendations.append(
                f"{len(breaking)} breaking changes detected. Consider creating a migration plan."
            )
            if any(c.type == ChangeType.TABLE_REMOVED for c in breaking):
                recommendations.append("Back up data for removed tables before applying changes.")
            if any("column_removed" in c.type.value for c in breaking):
                recommendations.append("Plan data migration for removed columns.")

        if warnings:
            recommendations.append(
                f"{len(warnings)} changes require attention. Review before applying."
            )
            if any(c.type == ChangeType.TABLE_COLUMN_ADDED for c in warnings):
                recommendations.append(
                    "Add default values or populate data for new NOT NULL columns."
                )

        if safe:
            recommendations.append(f"{len(safe)} safe changes can be applied automatically.")

        if not changes:
            recommendations.append("No changes detected. Schemas are identical.")

        return recommendations


def compare_schemas(current: ProjectSchema, new: ProjectSchema) -> SchemaComparison:
    """Convenience wrapper around ``SchemaChangeDetector.compare_schemas``."""
    return SchemaChangeDetector().compare_schemas(current, new)
