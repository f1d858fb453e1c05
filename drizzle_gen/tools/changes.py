# drizzle_gen/tools/changes.py
"""MCP tools for comparing schemas and applying changes."""

from typing import Optional

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from drizzle_gen.config import Settings
from drizzle_gen.models.schema import ProjectSchema
from drizzle_gen.services.diff import SchemaChangeDetector
from drizzle_gen.services.policy import apply_safe_changes
from drizzle_gen.services.reader import SchemaReader
from drizzle_gen.tools.schema import invalid_request


def _load(schema: dict, output_dir: str) -> ProjectSchema:
    data = dict(schema)
    data.setdefault("outputDir", output_dir)
    return ProjectSchema.model_validate(data)


def register_compare_tool(
    mcp: FastMCP,
    detector: SchemaChangeDetector,
    settings: Settings,
) -> None:
    """Register the compare and apply tools with the MCP server.

    Args:
        mcp: The FastMCP server instance.
        detector: The change detector instance.
        settings: Application settings, used for the default policy.
    """

    @mcp.tool()
    async def compare_schemas(current: dict, new: dict) -> dict:
        """
        Compare two JSON schema descriptions and classify every change.

        Args:
            current: The current schema description.
            new: The desired schema description.

        Returns:
            Changes, summary, recommendations and applicability flags.
        """
        try:
            current_schema = _load(current, settings.output_dir)
            new_schema = _load(new, settings.output_dir)
        except ValidationError as e:
            return invalid_request(e)

        comparison = detector.compare_schemas(current_schema, new_schema)
        return {"status": "success", "data": comparison.model_dump(mode="json")}

    @mcp.tool()
    async def apply_changes(
        path: str,
        new_schema: dict,
        allow_breaking: Optional[bool] = None,
        allow_warning: Optional[bool] = None,
        dry_run: Optional[bool] = None,
    ) -> dict:
        """
        Compare a generated project with a new schema and apply the allowed changes.

        Args:
            path: Root directory of the generated project.
            new_schema: The desired schema description.
            allow_breaking: Apply breaking changes (defaults to the server policy).
            allow_warning: Apply changes that need attention (defaults to the server policy).
            dry_run: Report the partition without writing files.

        Returns:
            The comparison and the applied/rejected partition.
        """
        try:
            desired = _load(new_schema, path)
        except ValidationError as e:
            return invalid_request(e)

        read = await SchemaReader(path).read_schema()
        if read.project_schema is None:
            return {"status": "error", "error": read.message, "errors": read.errors}
        if not read.success:
            return {
                "status": "error",
                "error": f"Project has unreadable files: {read.message}",
                "errors": read.errors,
            }

        policy = settings.apply_policy()
        overrides = {
            "allow_breaking": allow_breaking,
            "allow_warning": allow_warning,
            "dry_run": dry_run,
        }
        policy.update({k: v for k, v in overrides.items() if v is not None})

        comparison = detector.compare_schemas(read.project_schema, desired)
        result = await apply_safe_changes(path, comparison, **policy)

        return {
            "status": "error" if result.metadata.error else "success",
            "comparison": comparison.model_dump(mode="json"),
            "result": result.model_dump(mode="json"),
        }
