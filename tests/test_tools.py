# tests/test_tools.py
"""Tests for the MCP tool layer."""

import pytest

from drizzle_gen.config import Settings
from drizzle_gen.services.diff import SchemaChangeDetector
from drizzle_gen.tools.changes import register_compare_tool
from drizzle_gen.tools.schema import register_generate_tool, register_schema_tool
from drizzle_gen.utils.constants import ErrorCode


class FakeMCP:
    """Collects tools registered through ``@mcp.tool()``."""

    def __init__(self):
        self.tools = {}

    def tool(self):
        def decorator(func):
            self.tools[func.__name__] = func
            return func
        return decorator


@pytest.fixture
def tools(tmp_path):
    """All tools registered against a temporary output directory."""
    mcp = FakeMCP()
    settings = Settings(output_dir=str(tmp_path / "default"))
    register_generate_tool(mcp, settings.output_dir, overwrite=True)
    register_schema_tool(mcp)
    register_compare_tool(mcp, SchemaChangeDetector(), settings)
    return mcp.tools


SCHEMA = {
    "enums": [{"name": "Status", "values": ["active", "archived"]}],
    "tables": [{
        "name": "users",
        "columns": [
            {"name": "id", "type": "serial", "options": {"primaryKey": True}},
            {"name": "status", "options": {"enumValues": "Status", "default": "active"}},
        ],
    }],
}


@pytest.mark.integration
class TestTools:
    """Tool tests."""

    def test_registered_names(self, tools):
        """Test the exposed tool names."""
        assert set(tools) == {"generate_project", "read_schema", "compare_schemas", "apply_changes"}

    @pytest.mark.asyncio
    async def test_generate_and_read(self, tools, tmp_path):
        """Test generating into the default directory and reading back."""
        generated = await tools["generate_project"](SCHEMA)
        assert generated["status"] == "success"
        assert (tmp_path / "default" / "tables" / "users.ts").exists()

        read = await tools["read_schema"](str(tmp_path / "default"))
        assert read["status"] == "success"
        assert read["schema"]["tables"][0]["columns"][1]["options"] == {
            "enumValues": "Status", "default": "active",
        }

    @pytest.mark.asyncio
    async def test_invalid_schema(self, tools):
        """Test validation errors are returned as error dictionaries."""
        result = await tools["generate_project"]({"tables": [{"columns": []}]})
        assert result["status"] == "error"
        assert result["error"]["code"] == ErrorCode.INVALID_REQUEST.value

    @pytest.mark.asyncio
    async def test_read_missing_project(self, tools, tmp_path):
        """Test reading a missing directory."""
        result = await tools["read_schema"](str(tmp_path / "missing"))
        assert result["status"] == "error"
        assert "schema" not in result

    @pytest.mark.asyncio
    async def test_compare(self, tools):
        """Test comparing two descriptions."""
        new = {**SCHEMA, "enums": [{"name": "Status", "values": ["active"]}]}
        result = await tools["compare_schemas"](SCHEMA, new)
        assert result["status"] == "success"
        assert result["data"]["summary"]["by_impact"]["breaking"] == 1

    @pytest.mark.asyncio
    async def test_apply_changes_dry_run(self, tools, tmp_path):
        """Test the apply tool without writing files."""
        root = tmp_path / "default"
        await tools["generate_project"](SCHEMA)
        new = {**SCHEMA, "tables": []}

        result = await tools["apply_changes"](str(root), new, dry_run=True)

        assert result["status"] == "success"
        assert result["result"]["metadata"]["dry_run"] is True
        assert result["result"]["rejected"][0]["type"] == "table_removed"
        assert (root / "tables" / "users.ts").exists()

    @pytest.mark.asyncio
    async def test_apply_changes_writes(self, tools, tmp_path):
        """Test the apply tool writing a safe change."""
        root = tmp_path / "default"
        await tools["generate_project"](SCHEMA)
        new = {**SCHEMA, "enums": [{"name": "Status", "values": ["active", "archived", "deleted"]}]}

        result = await tools["apply_changes"](str(root), new)

        assert result["status"] == "success"
        assert result["result"]["metadata"]["applied_count"] == 1
        content = (root / "enums" / "Status.ts").read_text()
        assert "['Active', 'Archived', 'Deleted']" in content
