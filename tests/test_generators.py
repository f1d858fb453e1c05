# tests/test_generators.py
"""Tests for enum, helper and table generators."""

from drizzle_gen.models.schema import (
    ColumnDefinition,
    ColumnOptions,
    EnumDefinition,
    HelperDefinition,
    TableDefinition,
)
from drizzle_gen.services.generators import (
    SCHEMA_FILE_HEADER,
    generate_complete_schema,
    generate_enum,
    generate_helper,
    generate_multiple_helpers,
    generate_multiple_tables,
    generate_table,
    render_source_file,
)
from drizzle_gen.utils.constants import DRIZZLE_ORM, HELPERS_INDEX, PG_CORE


def int_column(name, **options):
    return ColumnDefinition(name=name, type="number", options=ColumnOptions(**options))


class TestEnumGenerator:
    """Enum generator tests."""

    def test_generate_enum(self):
        """Test db name and PascalCase values."""
        result = generate_enum(EnumDefinition(name="UserStatus", values=["active", "in_progress"]))
        assert result.error is None
        assert result.code == (
            "export const UserStatus = pgEnum('user_status', ['Active', 'InProgress'] as const);"
        )
        assert result.imports == {PG_CORE: ["pgEnum"]}

    def test_missing_values(self):
        """Test that empty values are rejected."""
        result = generate_enum(EnumDefinition(name="Empty", values=[]))
        assert result.error == "Enum name and values are mandatory."
        assert result.code == ""


class TestHelperGenerator:
    """Helper generator tests."""

    def test_generate_helper(self, base_fields_helper):
        """Test helper body and merged imports."""
        result = generate_helper(base_fields_helper)
        assert result.error is None
        assert result.code == (
            "export const BaseFields = {\n"
            "    id: serial('id').primaryKey(),\n"
            "    createdAt: timestamp('createdAt').notNull().default(sql`now()`)\n"
            "};"
        )
        assert result.imports == {PG_CORE: ["serial", "timestamp"], DRIZZLE_ORM: ["sql"]}

    def test_no_columns(self):
        """Test that helpers need a column."""
        result = generate_helper(HelperDefinition(name="Empty"))
        assert result.error == "At least one column is required for a helper."

    def test_fails_fast_on_bad_column(self):
        """Test that the first bad column aborts the whole helper."""
        helper = HelperDefinition(
            name="Audit",
            columns=[
                int_column("version"),
                ColumnDefinition(name="price", type="money"),
                ColumnDefinition(name="other"),
            ],
        )
        result = generate_helper(helper)
        assert result.error == "Error in column 'price': Unsupported type 'money' for column 'price'."
        assert result.code == ""


class TestTableGenerator:
    """Table generator tests."""

    def test_columns_then_helpers(self, users_table):
        """Test column order, helper spreads and db name."""
        result = generate_table(users_table)
        assert result.error is None
        assert result.code == (
            "export const users = pgTable('users', {\n"
            "    email: varchar('email', { length: 255 }).notNull(),\n"
            "    status: UserStatus('status').default('Active'),\n"
            "    ...BaseFields\n"
            "});"
        )
        assert result.imports[HELPERS_INDEX] == ["BaseFields"]
        assert list(result.imports)[0] == PG_CORE
        assert result.imports[PG_CORE][0] == "pgTable"

    def test_db_name_and_variable_asymmetry(self):
        """Test snake_case db name with a lower-cased binding."""
        result = generate_table(TableDefinition(name="UserProfiles", columns=[int_column("age")]))
        assert result.code.startswith("export const userprofiles = pgTable('user_profiles', {")

    def test_explicit_db_name(self):
        """Test that dbName overrides the derived name."""
        result = generate_table(
            TableDefinition(name="people", db_name="tbl_people", columns=[int_column("age")])
        )
        assert "pgTable('tbl_people'," in result.code

    def test_composite_primary_key(self):
        """Test the composite key block."""
        table = TableDefinition(
            name="PostTags",
            columns=[int_column("postId", not_null=True), int_column("tagId", not_null=True)],
            composite_primary_key=["postId", "tagId"],
        )
        result = generate_table(table)
        assert result.code == (
            "export const posttags = pgTable('post_tags', {\n"
            "    postId: integer('postId').notNull(),\n"
            "    tagId: integer('tagId').notNull()\n"
            "}, (posttags) => ({\n"
            "    compositePK: primaryKey({ columns: [posttags.postId, posttags.tagId] })\n"
            "}));"
        )
        assert result.imports == {PG_CORE: ["pgTable", "integer", "primaryKey"]}

    def test_single_column_composite_key_ignored(self):
        """Test that a one-element composite key renders nothing."""
        table = TableDefinition(name="tags", columns=[int_column("id")], composite_primary_key=["id"])
        result = generate_table(table)
        assert result.error is None
        assert "primaryKey" not in result.code
        assert "primaryKey" not in result.imports[PG_CORE]

    def test_requires_column_or_helper(self):
        """Test empty tables are rejected."""
        result = generate_table(TableDefinition(name="empty"))
        assert result.error == "Table must have at least one column or helper reference."

    def test_requires_name(self):
        """Test blank names are rejected."""
        result = generate_table(TableDefinition(name=" ", columns=[int_column("id")]))
        assert result.error == "Table name is required."

    def test_helper_only_table(self):
        """Test a table made only of helper spreads."""
        result = generate_table(TableDefinition(name="logs", helper_references=["BaseFields"]))
        assert result.code == "export const logs = pgTable('logs', {\n    ...BaseFields\n});"

    def test_referenced_tables(self, posts_table):
        """Test that references are collected."""
        result = generate_table(posts_table)
        assert result.tables == ["users"]


class TestBatchGeneration:
    """Collect-batch generation tests."""

    def test_multiple_tables_collects_errors(self, users_table, posts_table):
        """Test that failing tables are skipped and reported."""
        result = generate_multiple_tables([users_table, TableDefinition(name="empty"), posts_table])
        assert len(result.codes) == 2
        assert result.errors == [
            "Error in table 'empty': Table must have at least one column or helper reference."
        ]
        assert result.tables == ["users"]
        assert result.full_file == result.import_statements + "\n\n" + "\n\n".join(result.codes)

    def test_multiple_helpers(self, base_fields_helper):
        """Test helper batches without errors."""
        result = generate_multiple_helpers([base_fields_helper])
        assert result.errors is None
        assert result.import_statements == (
            "import { serial, timestamp } from 'drizzle-orm/pg-core';\n"
            "import { sql } from 'drizzle-orm';"
        )

    def test_complete_schema(self, users_table):
        """Test header and extra imports of the single schema file."""
        result = generate_complete_schema([users_table], {DRIZZLE_ORM: ["relations"]})
        assert result.full_file.startswith(SCHEMA_FILE_HEADER)
        assert "import { relations } from 'drizzle-orm';" in result.full_file
        assert result.imports[DRIZZLE_ORM] == ["relations"]


class TestRenderSourceFile:
    """Source file assembly tests."""

    def test_layout(self):
        """Test imports, blank line, declaration and trailing newline."""
        content = render_source_file({PG_CORE: ["pgEnum"]}, "export const A = 1;")
        assert content == "import { pgEnum } from 'drizzle-orm/pg-core';\n\nexport const A = 1;\n"
