# drizzle_gen/tools/schema.py
"""MCP tools for generating and reading projects."""

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from drizzle_gen.models.schema import ProjectSchema
from drizzle_gen.services.project import ProjectGenerator
from drizzle_gen.services.reader import SchemaReader
from drizzle_gen.utils.constants import ErrorCode
from drizzle_gen.utils.exceptions import DrizzleGenError


def invalid_request(error: ValidationError) -> dict:
    """Convert a pydantic validation error into an error response."""
    return DrizzleGenError(
        ErrorCode.INVALID_REQUEST,
        details={"errors": error.errors(include_url=False, include_context=False)},
    ).to_dict()


def register_generate_tool(mcp: FastMCP, default_output_dir: str, overwrite: bool = False) -> None:
    """Register the project generation tool with the MCP server.

    Args:
        mcp: The FastMCP server instance.
        default_output_dir: Output directory used when the schema names none.
        overwrite: Default overwrite policy when the schema leaves it unset.
    """

    @mcp.tool()
    async def generate_project(schema: dict) -> dict:
        """
        Generate a Drizzle ORM project from a JSON schema description.

        Args:
            schema: Project description with outputDir, enums, helpers and tables.

        Returns:
            The generated files and any entity errors.
        """
        data = dict(schema)
        data.setdefault("outputDir", default_output_dir)
        if data.get("overwrite") is None:
            data["overwrite"] = overwrite

        try:
            project = ProjectSchema.model_validate(data)
        except ValidationError as e:
            return invalid_request(e)

        try:
            result = await ProjectGenerator(project).generate()
        except Exception as e:
            return {"status": "error", "error": f"Failed to generate project: {e}"}

        return {
            "status": "success" if result.success else "error",
            "data": result.model_dump(),
        }


def register_schema_tool(mcp: FastMCP) -> None:
    """Register the schema reading tool with the MCP server.

    Args:
        mcp: The FastMCP server instance.
    """

    @mcp.tool()
    async def read_schema(path: str) -> dict:
        """
        Read a generated Drizzle project back into a JSON schema description.

        Args:
            path: Root directory of the generated project.

        Returns:
            The recovered schema, discovered files and parse errors.
        """
        result = await SchemaReader(path).read_schema()
        response = {
            "status": "success" if result.success else "error",
            "message": result.message,
            "files": result.files.model_dump(),
            "errors": result.errors,
            "metadata": result.metadata.model_dump(mode="json"),
        }
        if result.project_schema is not None:
            response["schema"] = result.project_schema.to_json_dict()
        return response
