# tests/test_project.py
"""Tests for the project generator."""

from pathlib import Path

import pytest

from drizzle_gen.models.schema import EnumDefinition, ProjectSchema
from drizzle_gen.services.project import ProjectGenerator, generate_project, render_index


pytestmark = pytest.mark.integration


class TestRenderIndex:
    """Index file tests."""

    def test_render_index(self):
        """Test export lines in given order."""
        assert render_index(["users.ts", "posts.ts"]) == (
            "export * from './users.js';\nexport * from './posts.js';\n"
        )


class TestProjectGenerator:
    """Project generator tests."""

    @pytest.mark.asyncio
    async def test_generate_structure(self, sample_schema):
        """Test files, indexes and structure of a full project."""
        result = await ProjectGenerator(sample_schema).generate()
        root = Path(sample_schema.output_dir)

        assert result.success
        assert result.errors is None
        assert result.structure.files.enums == ["UserStatus.ts"]
        assert result.structure.files.helpers == ["BaseFields.ts"]
        assert result.structure.files.tables == ["users.ts", "posts.ts"]
        assert result.structure.files.indexes == [
            "enums/index.ts", "helpers/index.ts", "tables/index.ts", "index.ts",
        ]
        assert len(result.generated_files) == 8

        assert (root / "enums" / "UserStatus.ts").read_text() == (
            "import { pgEnum } from 'drizzle-orm/pg-core';\n\n"
            "export const UserStatus = pgEnum('user_status', ['Active', 'Inactive', 'Pending'] as const);\n"
        )
        assert (root / "tables" / "index.ts").read_text() == (
            "export * from './users.js';\nexport * from './posts.js';\n"
        )
        assert (root / "index.ts").read_text() == (
            "export * from './enums/index.js';\n"
            "export * from './helpers/index.js';\n"
            "export * from './tables/index.js';\n"
        )

    @pytest.mark.asyncio
    async def test_empty_categories_omitted(self, tmp_path, users_table):
        """Test that empty categories get no index entry."""
        schema = ProjectSchema(output_dir=str(tmp_path), tables=[users_table])
        result = await generate_project(schema)

        assert result.structure.files.indexes == ["tables/index.ts", "index.ts"]
        assert (tmp_path / "index.ts").read_text() == "export * from './tables/index.js';\n"
        assert not (tmp_path / "enums" / "index.ts").exists()

    @pytest.mark.asyncio
    async def test_entity_errors_collected(self, tmp_path, users_table):
        """Test that a bad enum is reported and the rest is written."""
        schema = ProjectSchema(
            output_dir=str(tmp_path),
            enums=[EnumDefinition(name="Empty", values=[])],
            tables=[users_table],
        )
        result = await generate_project(schema)

        assert not result.success
        assert result.errors == ["Enum 'Empty': Enum name and values are mandatory."]
        assert (tmp_path / "tables" / "users.ts").exists()

    @pytest.mark.asyncio
    async def test_overwrite_disabled(self, sample_schema):
        """Test that existing files are kept without overwrite."""
        await generate_project(sample_schema)
        target = Path(sample_schema.output_dir) / "tables" / "users.ts"
        target.write_text("// edited\n")

        result = await generate_project(sample_schema.model_copy(update={"overwrite": False}))

        assert not result.success
        assert f"File already exists: {target} (use overwrite: true to replace)" in result.errors
        assert target.read_text() == "// edited\n"

    @pytest.mark.asyncio
    async def test_overwrite_enabled(self, sample_schema):
        """Test that overwrite replaces existing files."""
        await generate_project(sample_schema)
        target = Path(sample_schema.output_dir) / "tables" / "users.ts"
        target.write_text("// edited\n")

        result = await generate_project(sample_schema)

        assert result.success
        assert target.read_text().startswith("import ")
