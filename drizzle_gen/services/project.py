# drizzle_gen/services/project.py
"""Project generator: writes enums, helpers, tables and index files."""

import asyncio
import logging
from pathlib import Path
from typing import Callable

from drizzle_gen.models.results import ProjectFiles, ProjectResult, ProjectStructure
from drizzle_gen.models.schema import ProjectSchema
from drizzle_gen.services.generators import (
    generate_enum,
    generate_helper,
    generate_table,
    render_source_file,
)
from drizzle_gen.utils.constants import (
    ENUMS_DIR,
    HELPERS_DIR,
    INDEX_FILE,
    SOURCE_SUFFIX,
    TABLES_DIR,
)

logger = logging.getLogger("project-generator")


def render_index(file_names: list[str]) -> str:
    """Render ``export * from './X.js';`` lines for the given ``.ts`` files."""
    lines = [f"export * from './{name[:-len(SOURCE_SUFFIX)]}.js';" for name in file_names]
    return "\n".join(lines) + "\n"


class ProjectGenerator:
    """Generate the complete directory structure for a project schema."""

    def __init__(self, schema: ProjectSchema):
        """Initialize the project generator.

        Args:
            schema: The project description to write out.
        """
        self.schema = schema
        self.output_dir = Path(schema.output_dir)
        self._generated_files: list[str] = []
        self._errors: list[str] = []

    async def generate(self) -> ProjectResult:
        """Write every entity file and the index files.

        Entity errors are collected and generation continues with the
        remaining entities; only unexpected failures abort the run.

        Returns:
            The generation result.
        """
        self._generated_files = []
        self._errors = []

        try:
            enums_dir = self.output_dir / ENUMS_DIR
            helpers_dir = self.output_dir / HELPERS_DIR
            tables_dir = self.output_dir / TABLES_DIR
            for directory in (self.output_dir, enums_dir, helpers_dir, tables_dir):
                await asyncio.to_thread(directory.mkdir, parents=True, exist_ok=True)

            enum_files = await self._generate_category(
                "Enum", self.schema.enums or [], enums_dir, generate_enum
            )
            helper_files = await self._generate_category(
                "Helper", self.schema.helpers or [], helpers_dir, generate_helper
            )
            table_files = await self._generate_category(
                "Table", self.schema.tables or [], tables_dir, generate_table
            )
            index_files = await self._generate_index_files(enum_files, helper_files, table_files)
        except OSError as e:
            logger.error("Project generation failed for %s: %s", self.output_dir, e)
            return ProjectResult(
                success=False,
                message=f"Failed to generate project: {e}",
                errors=[str(e)],
                generated_files=list(self._generated_files),
            )

        errors = list(self._errors)
        if errors:
            message = f"Generated with {len(errors)} errors"
            logger.warning("%s in %s: %s", message, self.output_dir, errors)
        else:
            message = f"Successfully generated {len(self._generated_files)} files"
            logger.info("%s in %s", message, self.output_dir)

        return ProjectResult(
            success=not errors,
            message=message,
            errors=errors or None,
            generated_files=list(self._generated_files),
            structure=ProjectStructure(
                enums_dir=str(enums_dir),
                helpers_dir=str(helpers_dir),
                tables_dir=str(tables_dir),
                files=ProjectFiles(
                    enums=enum_files,
                    helpers=helper_files,
                    tables=table_files,
                    indexes=index_files,
                ),
            ),
        )

    async def _generate_category(
        self,
        label: str,
        definitions: list,
        directory: Path,
        generate: Callable,
    ) -> list[str]:
        file_names = []
        for definition in definitions:
            result = generate(definition)
            if result.error:
                self._errors.append(f"{label} '{definition.name}': {result.error}")
                continue

            file_name = f"{definition.name}{SOURCE_SUFFIX}"
            content = render_source_file(result.imports, result.code)
            if await self._write_file(directory / file_name, content):
                file_names.append(file_name)
        return file_names

    async def _generate_index_files(
        self,
        enum_files: list[str],
        helper_files: list[str],
        table_files: list[str],
    ) -> list[str]:
        index_files = []
        root_exports = []

        for directory, files in (
            (ENUMS_DIR, enum_files),
            (HELPERS_DIR, helper_files),
            (TABLES_DIR, table_files),
        ):
            if not files:
                continue
            path = self.output_dir / directory / INDEX_FILE
            if await self._write_file(path, render_index(files)):
                index_files.append(f"{directory}/{INDEX_FILE}")
            root_exports.append(f"export * from './{directory}/index.js';")

        if root_exports:
            content = "\n".join(root_exports) + "\n"
            if await self._write_file(self.output_dir / INDEX_FILE, content):
                index_files.append(INDEX_FILE)

        return index_files

    async def _write_file(self, path: Path, content: str) -> bool:
        """Write a file unless it exists and overwriting is disabled."""
        if not self.schema.overwrite and path.exists():
            self._errors.append(
                f"File already exists: {path} (use overwrite: true to replace)"
            )
            return False

        await asyncio.to_thread(path.parent.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread(path.write_text, content, encoding="utf-8")
        self._generated_files.append(str(path))
        return True


async def generate_project(schema: ProjectSchema) -> ProjectResult:
    """Convenience wrapper around ``ProjectGenerator.generate``."""
    return await ProjectGenerator(schema).generate()
