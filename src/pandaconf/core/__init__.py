"""Core pandaconf module — errors and logging shared by every layer."""

from pandaconf.core.exceptions import (
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    CredentialReadError,
    ErrorCode,
    IncompleteKeyPairError,
    InvalidBasePathError,
    InvalidOverrideError,
    MalformedCredentialError,
    SnapshotAlreadySetError,
)
from pandaconf.core.structured_logger import StructuredLogger, get_logger

__all__ = [
    "ConfigError",
    "ConfigNotFoundError",
    "ConfigParseError",
    "ConfigValidationError",
    "CredentialReadError",
    "ErrorCode",
    "get_logger",
    "IncompleteKeyPairError",
    "InvalidBasePathError",
    "InvalidOverrideError",
    "MalformedCredentialError",
    "SnapshotAlreadySetError",
    "StructuredLogger",
]
