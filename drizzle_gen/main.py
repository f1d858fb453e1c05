# drizzle_gen/main.py
"""Main entry point for the drizzle-gen MCP server."""

import argparse
import asyncio
import logging

from mcp.server.fastmcp import FastMCP

from drizzle_gen.config import Settings
from drizzle_gen.services.diff import SchemaChangeDetector
from drizzle_gen.tools.changes import register_compare_tool
from drizzle_gen.tools.schema import register_generate_tool, register_schema_tool


logger = logging.getLogger("drizzle_gen")


def create_mcp_app(settings: Settings) -> FastMCP:
    """Create and configure the MCP application.

    Args:
        settings: Application settings.

    Returns:
        Configured FastMCP instance.
    """
    mcp = FastMCP("drizzle-gen", host=settings.mcp_host, port=settings.mcp_port)
    _register_tools(mcp, settings)
    return mcp


def _register_tools(mcp: FastMCP, settings: Settings) -> None:
    """Register all MCP tools.

    Args:
        mcp: The FastMCP instance.
        settings: Application settings.
    """
    register_generate_tool(mcp, settings.output_dir, overwrite=settings.overwrite)
    register_schema_tool(mcp)
    register_compare_tool(mcp, SchemaChangeDetector(), settings)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Drizzle ORM schema generator MCP server")
    parser.add_argument(
        "--output-dir",
        type=str,
        help="Default project directory for generated files"
    )
    parser.add_argument(
        "--host",
        type=str,
        help="Host for the SSE transport"
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Port for the SSE transport"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level"
    )
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Merge command line arguments over environment settings."""
    overrides = {
        "output_dir": args.output_dir,
        "mcp_host": args.host,
        "mcp_port": args.port,
        "log_level": args.log_level,
    }
    return Settings(**{k: v for k, v in overrides.items() if v is not None})


def main() -> None:
    """Main entry point for the server."""
    args = build_parser().parse_args()
    settings = load_settings(args)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    logger.info("Starting drizzle-gen server initialization")
    asyncio.run(run_server(settings))


async def run_server(settings: Settings) -> None:
    """Run the MCP server.

    Args:
        settings: Application settings.
    """
    logger.info("settings: %s", settings.model_dump())
    mcp = create_mcp_app(settings)

    logger.info("drizzle-gen server ready on %s:%s", settings.mcp_host, settings.mcp_port)
    await mcp.run_sse_async()


if __name__ == "__main__":
    main()
