"""Paths derived from the configuration document."""

import posixpath
from typing import TYPE_CHECKING

from pandaconf.core.exceptions import InvalidBasePathError

if TYPE_CHECKING:
    from pandaconf.config.schema import Config

PID_FILE_NAME = "pid.lock"


def pid_file(config: "Config") -> str:
    """
    Lock file path for the node: ``<data_directory>/pid.lock``.

    Computed on every call from the current data directory.

    Raises:
        InvalidBasePathError: If the data directory is empty or relative
    """
    directory = config.redpanda.data_directory
    if not directory or not directory.strip():
        raise InvalidBasePathError("redpanda.data_directory is empty")
    if "\x00" in directory or not posixpath.isabs(directory):
        raise InvalidBasePathError(
            f"redpanda.data_directory must be an absolute path, got {directory!r}",
            details={'data_directory': directory},
        )
    return posixpath.join(directory, PID_FILE_NAME)
