# drizzle_gen/services/reader.py
"""Read a generated project back into a schema description."""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from drizzle_gen.models.results import ProjectFiles, ReaderMetadata, ReaderResult
from drizzle_gen.models.schema import (
    EnumDefinition,
    HelperDefinition,
    ProjectSchema,
    TableDefinition,
)
from drizzle_gen.services.column_codec import decode_column
from drizzle_gen.services.source_parser import (
    BodyEntry,
    HelperSpread,
    parse_enum,
    parse_helper,
    parse_table,
)
from drizzle_gen.utils.casing import snake_case
from drizzle_gen.utils.constants import (
    ENUMS_DIR,
    HELPERS_DIR,
    INDEX_FILE,
    SOURCE_SUFFIX,
    TABLES_DIR,
)
from drizzle_gen.utils.exceptions import ProjectReadError, SourceDecodeError

logger = logging.getLogger("schema-reader")

INVALID_PROJECT_MESSAGE = "Project directory not found or not a valid Drizzle project"


def _decode_body(entries: list[BodyEntry]):
    columns = []
    helper_refs = []
    for entry in entries:
        if isinstance(entry, HelperSpread):
            helper_refs.append(entry.name)
        else:
            columns.append(decode_column(entry.text))
    return columns, helper_refs


def decode_enum(source: str) -> EnumDefinition:
    """Decode an enum file. Values come back in snake_case."""
    decl = parse_enum(source)
    return EnumDefinition(name=decl.name, values=[snake_case(v) for v in decl.values])


def decode_helper(source: str) -> HelperDefinition:
    """Decode a helper file; spreads are not allowed inside helpers."""
    decl = parse_helper(source)
    columns, helper_refs = _decode_body(decl.body)
    if helper_refs:
        raise SourceDecodeError(f"Helper '{decl.name}' cannot spread other helpers", source=source)
    return HelperDefinition(name=decl.name, columns=columns)


def decode_table(source: str, name: str) -> TableDefinition:
    """Decode a table file.

    Args:
        source: The file content.
        name: The table name, taken from the file name.

    Returns:
        The table definition. ``dbName`` is only set when it differs from
        the snake_case form of ``name``.
    """
    decl = parse_table(source)
    columns, helper_refs = _decode_body(decl.body)

    table = {"name": name, "columns": columns}
    if decl.db_name != snake_case(name):
        table["db_name"] = decl.db_name
    if helper_refs:
        table["helper_references"] = helper_refs
    if decl.composite_key:
        table["composite_primary_key"] = decl.composite_key
    return TableDefinition(**table)


class SchemaReader:
    """Reads previously generated Drizzle files back to definitions.

    Each ``read_schema`` call collects its own errors, so one instance can
    be read repeatedly without earlier failures leaking into later results.
    """

    def __init__(self, project_path: str | Path):
        """Initialize the schema reader.

        Args:
            project_path: Root directory of a generated project.
        """
        self.project_path = Path(project_path)

    async def read_schema(self) -> ReaderResult:
        """Read the complete schema from the generated files.

        Returns:
            The reader result. Files that fail to decode are reported in
            ``errors`` and left out of the schema; the rest is still returned.
        """
        try:
            await self._check_project()

            errors: list[str] = []
            files = await self._discover_files()

            enums = await self._read_category(
                "enum", ENUMS_DIR, files.enums, lambda src, _: decode_enum(src), errors
            )
            helpers = await self._read_category(
                "helper", HELPERS_DIR, files.helpers, lambda src, _: decode_helper(src), errors
            )
            tables = await self._read_category("table", TABLES_DIR, files.tables, decode_table, errors)

            schema = ProjectSchema(
                output_dir=str(self.project_path),
                enums=enums or None,
                helpers=helpers or None,
                tables=tables or None,
                overwrite=True,
            )
            metadata = await self._metadata(files)
        except ProjectReadError as e:
            logger.warning("Cannot read project %s: %s", self.project_path, e.message)
            return self._failure(INVALID_PROJECT_MESSAGE, e.message)
        except Exception as e:
            logger.exception("Failed to read schema from %s", self.project_path)
            return self._failure(f"Failed to read schema: {e}", str(e))

        if errors:
            message = f"Read schema with {len(errors)} errors"
            logger.warning("%s from %s", message, self.project_path)
        else:
            message = (
                f"Successfully read schema with {len(enums)} enums, "
                f"{len(helpers)} helpers, {len(tables)} tables"
            )
            logger.info("%s from %s", message, self.project_path)

        return ReaderResult(
            success=not errors,
            message=message,
            project_schema=schema,
            files=files,
            errors=errors or None,
            metadata=metadata,
        )

    async def _check_project(self) -> None:
        """A project is valid when it has a root index or a category directory."""
        root = self.project_path
        if not await asyncio.to_thread(root.is_dir):
            raise ProjectReadError(
                "Project directory does not exist or is not a valid Drizzle project", path=str(root)
            )
        if await asyncio.to_thread((root / INDEX_FILE).is_file):
            return
        for directory in (ENUMS_DIR, HELPERS_DIR, TABLES_DIR):
            if await asyncio.to_thread((root / directory).is_dir):
                return
        raise ProjectReadError(
            "Project directory does not exist or is not a valid Drizzle project", path=str(root)
        )

    def _list_sources(self, directory: str) -> list[str]:
        path = self.project_path / directory
        if not path.is_dir():
            return []
        return sorted(
            p.name for p in path.glob(f"*{SOURCE_SUFFIX}")
            if p.is_file() and p.name != INDEX_FILE
        )

    async def _discover_files(self) -> ProjectFiles:
        files = ProjectFiles(
            enums=await asyncio.to_thread(self._list_sources, ENUMS_DIR),
            helpers=await asyncio.to_thread(self._list_sources, HELPERS_DIR),
            tables=await asyncio.to_thread(self._list_sources, TABLES_DIR),
        )
        candidates = [INDEX_FILE] + [
            f"{d}/{INDEX_FILE}" for d in (ENUMS_DIR, HELPERS_DIR, TABLES_DIR)
        ]
        for candidate in candidates:
            if await asyncio.to_thread((self.project_path / candidate).is_file):
                files.indexes.append(candidate)
        return files

    async def _read_category(
        self,
        kind: str,
        directory: str,
        file_names: list[str],
        decode: Callable[[str, str], object],
        errors: list[str],
    ) -> list:
        definitions = []
        for file_name in file_names:
            path = self.project_path / directory / file_name
            try:
                source = await asyncio.to_thread(path.read_text, encoding="utf-8")
                definitions.append(decode(source, file_name[:-len(SOURCE_SUFFIX)]))
            except SourceDecodeError as e:
                errors.append(f"Could not parse {kind} in {file_name}: {e.message}")
            except (OSError, UnicodeDecodeError) as e:
                errors.append(f"Could not read {kind} file {file_name}: {e}")
        return definitions

    async def _metadata(self, files: ProjectFiles) -> ReaderMetadata:
        index = self.project_path / INDEX_FILE
        try:
            stat = await asyncio.to_thread(index.stat)
            last_modified = datetime.fromtimestamp(stat.st_mtime)
        except OSError:
            last_modified = datetime.now()
        return ReaderMetadata(
            last_modified=last_modified,
            total_files=files.total,
            project_path=str(self.project_path),
        )

    def _failure(self, message: str, error: Optional[str]) -> ReaderResult:
        return ReaderResult(
            success=False,
            message=message,
            errors=[error] if error else None,
            metadata=ReaderMetadata(
                last_modified=datetime.now(),
                total_files=0,
                project_path=str(self.project_path),
            ),
        )


async def read_schema(project_path: str | Path) -> ReaderResult:
    """Convenience wrapper around ``SchemaReader.read_schema``."""
    return await SchemaReader(project_path).read_schema()
