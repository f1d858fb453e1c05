# drizzle_gen/services/policy.py
"""Change-application policy gate."""

import logging
from pathlib import Path
from typing import Optional

from drizzle_gen.models.changes import (
    ApplyMetadata,
    ApplyResult,
    Change,
    ChangeImpact,
    SchemaComparison,
)
from drizzle_gen.services.materializer import SchemaMaterializer
from drizzle_gen.utils.exceptions import MaterializationError

logger = logging.getLogger("schema-policy")


def should_apply_change(change: Change, allow_breaking: bool, allow_warning: bool) -> bool:
    """Decide whether a single change passes the policy.

    Safe changes always pass, warnings pass when ``allow_warning`` is set
    and breaking changes only when ``allow_breaking`` is set.
    """
    if change.impact == ChangeImpact.SAFE:
        return True
    if change.impact == ChangeImpact.WARNING:
        return allow_warning
    if change.impact == ChangeImpact.BREAKING:
        return allow_breaking
    return False


async def apply_safe_changes(
    project_path: str | Path,
    comparison: SchemaComparison,
    allow_breaking: bool = False,
    allow_warning: bool = True,
    dry_run: bool = False,
    materializer: Optional[SchemaMaterializer] = None,
) -> ApplyResult:
    """Partition a comparison into applied and rejected changes.

    Args:
        project_path: Root of the generated project.
        comparison: Output of ``compare_schemas``.
        allow_breaking: Apply breaking changes too.
        allow_warning: Apply changes that need attention.
        dry_run: Only compute the partition, leave the files alone.
        materializer: Writes the applied changes; defaults to ``SchemaMaterializer``.

    Returns:
        The applied and rejected changes, in comparison order. A failed
        write is reported in ``metadata.error`` and does not change the
        partition.
    """
    applied: list[Change] = []
    rejected: list[Change] = []
    for change in comparison.changes:
        if should_apply_change(change, allow_breaking, allow_warning):
            applied.append(change)
        else:
            rejected.append(change)

    logger.info(
        "Policy gate for %s: %d applied, %d rejected (dry_run=%s)",
        project_path, len(applied), len(rejected), dry_run,
    )

    error = None
    if not dry_run and applied:
        materializer = materializer or SchemaMaterializer()
        try:
            await materializer.materialize(project_path, applied)
        except MaterializationError as e:
            logger.error("Failed to apply changes to %s: %s", project_path, e.message)
            error = e.message

    return ApplyResult(
        applied=applied,
        rejected=rejected,
        metadata=ApplyMetadata(
            total_changes=len(comparison.changes),
            applied_count=len(applied),
            rejected_count=len(rejected),
            dry_run=dry_run,
            error=error,
        ),
    )
