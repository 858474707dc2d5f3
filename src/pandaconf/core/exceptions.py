"""
Custom Exceptions for pandaconf
===============================

Structured error handling lets callers react to the kind of configuration
failure instead of parsing message strings.

Error Codes:
- 1xxx: Document errors (missing file, decode, validation, overrides)
- 2xxx: Credential errors (TLS key pairs and files)
- 3xxx: Derived value errors (paths computed from the document)
"""

from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Structured error codes for operator-facing messages"""

    # 1xxx: Document Errors
    CONFIG_NOT_FOUND = 1001
    CONFIG_PARSE_ERROR = 1002
    CONFIG_VALIDATION_ERROR = 1003
    INVALID_OVERRIDE = 1004
    SNAPSHOT_ALREADY_SET = 1005

    # 2xxx: Credential Errors
    INCOMPLETE_KEY_PAIR = 2001
    CREDENTIAL_READ_FAILURE = 2002
    MALFORMED_CREDENTIAL = 2003

    # 3xxx: Derived Value Errors
    INVALID_BASE_PATH = 3001


class ConfigError(Exception):
    """Base exception for all pandaconf errors"""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFIG_VALIDATION_ERROR,
        details: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for structured logging"""
        return {
            'error_type': self.__class__.__name__,
            'error_code': int(self.error_code),
            'message': self.message,
            'details': self.details
        }

    def user_message(self) -> str:
        """Get operator-facing error message based on error code"""
        code_messages = {
            ErrorCode.CONFIG_NOT_FOUND: "Configuration file could not be read",
            ErrorCode.CONFIG_PARSE_ERROR: "Configuration file is not valid YAML or JSON",
            ErrorCode.CONFIG_VALIDATION_ERROR: "Configuration has invalid values",
            ErrorCode.INVALID_OVERRIDE: "Invalid configuration override",
            ErrorCode.SNAPSHOT_ALREADY_SET: "Configuration snapshot already recorded",
            ErrorCode.INCOMPLETE_KEY_PAIR: "TLS certificate and key must be set together",
            ErrorCode.CREDENTIAL_READ_FAILURE: "TLS credential file could not be read",
            ErrorCode.MALFORMED_CREDENTIAL: "TLS credential file is malformed",
            ErrorCode.INVALID_BASE_PATH: "Invalid data directory",
        }
        return f"Error {int(self.error_code)}: {code_messages.get(self.error_code, self.message)}"


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested config file cannot be read"""

    def __init__(self, path: str, details: dict[str, Any] | None = None):
        super().__init__(f"unable to read config file {path}", ErrorCode.CONFIG_NOT_FOUND, details)
        self.path = path


class ConfigParseError(ConfigError):
    """Raised when config bytes do not decode into a mapping"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.CONFIG_PARSE_ERROR, details)


class ConfigValidationError(ConfigError):
    """Raised when a decoded document does not fit the typed model"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.CONFIG_VALIDATION_ERROR, details)


class InvalidOverrideError(ConfigError):
    """Raised when a key=value override cannot be applied"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.INVALID_OVERRIDE, details)


class SnapshotAlreadySetError(ConfigError):
    """Raised when the pristine snapshot is assigned a second time"""

    def __init__(self, message: str = "pristine snapshot is already set", details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.SNAPSHOT_ALREADY_SET, details)


class IncompleteKeyPairError(ConfigError):
    """Raised when only one of cert_file / key_file is configured"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.INCOMPLETE_KEY_PAIR, details)


class CredentialReadError(ConfigError):
    """Raised when the file reader fails on a credential path"""

    def __init__(self, path: str, reason: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"unable to read {path}: {reason}",
            ErrorCode.CREDENTIAL_READ_FAILURE,
            {'path': path, **(details or {})},
        )
        self.path = path


class MalformedCredentialError(ConfigError):
    """Raised when credential bytes are rejected by the TLS library"""

    def __init__(self, path: str, reason: str, details: dict[str, Any] | None = None):
        super().__init__(
            f"invalid TLS material in {path}: {reason}",
            ErrorCode.MALFORMED_CREDENTIAL,
            {'path': path, **(details or {})},
        )
        self.path = path


class InvalidBasePathError(ConfigError):
    """Raised when a derived path would not be absolute"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.INVALID_BASE_PATH, details)
