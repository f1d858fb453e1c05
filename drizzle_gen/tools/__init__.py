# drizzle_gen/tools/__init__.py
"""MCP tools for drizzle-gen."""

from drizzle_gen.tools.schema import register_generate_tool, register_schema_tool
from drizzle_gen.tools.changes import register_compare_tool

__all__ = [
    "register_generate_tool",
    "register_schema_tool",
    "register_compare_tool",
]
