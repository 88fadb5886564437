"""Custom exceptions for wwtt.

Provides a structured exception hierarchy with error codes and
machine-readable error information for callers that need to decide
how a failure is presented.
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Error codes for machine-readable error identification."""

    # Note errors (1xxx)
    NOTE_NOT_FOUND = 1001
    NOTE_ALREADY_EXISTS = 1003

    # Storage errors (4xxx)
    STORAGE_READ_FAILED = 4001
    STORAGE_WRITE_FAILED = 4002
    STORAGE_FORMAT_INVALID = 4003

    # Configuration errors (6xxx)
    CONFIG_INVALID = 6001

    # Validation errors (7xxx)
    VALIDATION_FAILED = 7001


class WwttError(Exception):
    """Base exception for all wwtt errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VALIDATION_FAILED,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"[{self.code.name}] {self.message} ({detail_str})"
        return f"[{self.code.name}] {self.message}"


class NoteNotFoundError(WwttError):
    """Raised when a mutation targets a note name that is not in the store."""

    def __init__(self, name: str, message: Optional[str] = None):
        super().__init__(
            message or f"Note '{name}' not found",
            code=ErrorCode.NOTE_NOT_FOUND,
            details={"name": name}
        )
        self.name = name


class NoteAlreadyExistsError(WwttError):
    """Raised when a caller refuses to create a second note with a taken name."""

    def __init__(self, name: str, message: Optional[str] = None):
        super().__init__(
            message or f"Note '{name}' already exists",
            code=ErrorCode.NOTE_ALREADY_EXISTS,
            details={"name": name}
        )
        self.name = name


class StorageError(WwttError):
    """Raised when the notes file cannot be opened, read, created or written."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        path: Optional[str] = None,
        code: ErrorCode = ErrorCode.STORAGE_READ_FAILED,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if operation:
            details["operation"] = operation
        if path:
            # Only the file name, never the full path
            details["path_hint"] = path.split("/")[-1] if "/" in path else path
        if original_error:
            details["original_error"] = str(original_error)[:200]

        super().__init__(message, code=code, details=details)
        self.operation = operation
        self.path = path
        self.original_error = original_error


class StorageFormatError(StorageError):
    """Raised when the notes file does not parse into the expected shape.

    There is no best-effort recovery: a file that fails to parse is
    reported as a whole and nothing is loaded from it.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        path: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(
            message,
            operation=operation,
            path=path,
            code=ErrorCode.STORAGE_FORMAT_INVALID,
            original_error=original_error
        )


class ConfigurationError(WwttError):
    """Raised for configuration-related errors."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        code: ErrorCode = ErrorCode.CONFIG_INVALID
    ):
        details = {}
        if config_key:
            details["config_key"] = config_key

        super().__init__(message, code=code, details=details)
        self.config_key = config_key


class ValidationError(WwttError):
    """Raised for general validation errors."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        code: ErrorCode = ErrorCode.VALIDATION_FAILED
    ):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)[:100]

        super().__init__(message, code=code, details=details)
        self.field = field
        self.value = value
