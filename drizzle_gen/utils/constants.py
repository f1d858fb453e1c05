# drizzle_gen/utils/constants.py
"""Constants for drizzle-gen."""

from enum import Enum


class ErrorCode(str, Enum):
    """Error code enumeration."""

    COLUMN_DEFINITION_INVALID = "ERR_001"
    ENTITY_VALIDATION_FAILED = "ERR_002"
    SOURCE_DECODE_FAILED = "ERR_003"
    PROJECT_READ_FAILED = "ERR_004"
    MATERIALIZATION_FAILED = "ERR_005"
    INVALID_REQUEST = "ERR_006"


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.COLUMN_DEFINITION_INVALID: "Column definition cannot be rendered",
    ErrorCode.ENTITY_VALIDATION_FAILED: "Entity definition is incomplete",
    ErrorCode.SOURCE_DECODE_FAILED: "Source text does not match the generated grammar",
    ErrorCode.PROJECT_READ_FAILED: "Project directory could not be read",
    ErrorCode.MATERIALIZATION_FAILED: "Applied changes could not be written to the project",
    ErrorCode.INVALID_REQUEST: "Request parameters are incomplete or malformed",
}


# Import sources referenced by generated files
PG_CORE = "drizzle-orm/pg-core"
DRIZZLE_ORM = "drizzle-orm"
ENUMS_INDEX = "../enums/index.js"
HELPERS_INDEX = "../helpers/index.js"
TABLES_INDEX = "../tables/index.js"

# Project directory convention
ENUMS_DIR = "enums"
HELPERS_DIR = "helpers"
TABLES_DIR = "tables"
INDEX_FILE = "index.ts"
SOURCE_SUFFIX = ".ts"
