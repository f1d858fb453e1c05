# drizzle_gen/utils/exceptions.py
"""Exception classes for drizzle-gen."""

from drizzle_gen.utils.constants import ErrorCode, ERROR_MESSAGES


class DrizzleGenError(Exception):
    """Base exception class for drizzle-gen."""

    def __init__(
        self,
        code: ErrorCode,
        message: str | None = None,
        details: dict | None = None
    ):
        self.code = code
        self.message = message or ERROR_MESSAGES.get(code, "Unknown error")
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert the exception to a dictionary format.

        Returns:
            A dictionary representation of the error.
        """
        return {
            "status": "error",
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details
            }
        }


class ColumnDefinitionError(DrizzleGenError):
    """A column definition cannot be resolved or rendered."""

    def __init__(self, column: str, message: str):
        super().__init__(
            code=ErrorCode.COLUMN_DEFINITION_INVALID,
            message=message,
            details={"column": column}
        )


class EntityValidationError(DrizzleGenError):
    """An enum, helper or table definition is missing required fields."""

    def __init__(self, message: str, entity: str | None = None):
        super().__init__(
            code=ErrorCode.ENTITY_VALIDATION_FAILED,
            message=message,
            details={"entity": entity} if entity else None
        )


class SourceDecodeError(DrizzleGenError):
    """Source text falls outside the grammar the encoder produces."""

    def __init__(self, message: str, source: str = "", position: int | None = None):
        details: dict = {"source": source}
        if position is not None:
            details["position"] = position
            message = f"{message} at position {position}"
        super().__init__(
            code=ErrorCode.SOURCE_DECODE_FAILED,
            message=message,
            details=details
        )


class ProjectReadError(DrizzleGenError):
    """Project directory is missing or unreadable."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(
            code=ErrorCode.PROJECT_READ_FAILED,
            message=message,
            details={"path": path}
        )


class MaterializationError(DrizzleGenError):
    """Applied changes could not be regenerated on disk."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(
            code=ErrorCode.MATERIALIZATION_FAILED,
            message=message,
            details={"path": path}
        )
