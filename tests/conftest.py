"""Pytest configuration and fixtures for drizzle-gen tests."""

import pytest

from drizzle_gen.models.schema import (
    ColumnDefinition,
    ColumnOptions,
    EnumDefinition,
    HelperDefinition,
    ProjectSchema,
    ReferenceDefinition,
    TableDefinition,
)


# Markers for test categorization
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests that write and read generated projects"
    )
    config.addinivalue_line(
        "markers", "slow: marks tests as slow running tests"
    )


def pytest_collection_modifyitems(config, items):
    """Run unit tests before integration tests."""
    items.sort(key=lambda item: item.get_closest_marker("integration") is not None)


@pytest.fixture
def user_status_enum():
    """Enum with snake_case values."""
    return EnumDefinition(name="UserStatus", values=["active", "inactive", "pending"])


@pytest.fixture
def base_fields_helper():
    """Helper with a serial key and a timestamp."""
    return HelperDefinition(
        name="BaseFields",
        columns=[
            ColumnDefinition(name="id", type="serial", options=ColumnOptions(primary_key=True)),
            ColumnDefinition(
                name="createdAt",
                type="date",
                options=ColumnOptions(not_null=True, default="sql.now()"),
            ),
        ],
    )


@pytest.fixture
def users_table():
    """Table spreading BaseFields with an enum column."""
    return TableDefinition(
        name="users",
        columns=[
            ColumnDefinition(
                name="email",
                type="string",
                options=ColumnOptions(not_null=True, length=255),
            ),
            ColumnDefinition(
                name="status",
                options=ColumnOptions(enum_values="UserStatus", default="active"),
            ),
        ],
        helper_references=["BaseFields"],
    )


@pytest.fixture
def posts_table():
    """Table with a foreign key to users."""
    return TableDefinition(
        name="posts",
        columns=[
            ColumnDefinition(name="id", type="serial", options=ColumnOptions(primary_key=True)),
            ColumnDefinition(name="title", type="text", options=ColumnOptions(not_null=True)),
            ColumnDefinition(name="published", type="boolean", options=ColumnOptions(default=False)),
            ColumnDefinition(
                name="authorId",
                type="number",
                options=ColumnOptions(
                    not_null=True,
                    references=ReferenceDefinition(table="users", column="id"),
                ),
            ),
        ],
    )


@pytest.fixture
def sample_schema(tmp_path, user_status_enum, base_fields_helper, users_table, posts_table):
    """Complete project schema writing into a temporary directory."""
    return ProjectSchema(
        output_dir=str(tmp_path / "schema"),
        enums=[user_status_enum],
        helpers=[base_fields_helper],
        tables=[users_table, posts_table],
        overwrite=True,
    )
