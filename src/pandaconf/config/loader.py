"""
Configuration Loader
====================

Builds the two views of a node's configuration:

- the pristine document: exactly what the file said, no defaults, no
  overrides. Recorded once, never changed afterwards.
- the effective document: defaults < file < environment < set-flags.
  This is what the rest of the program reads and may freely edit.

Example:
--------
layered = load_config("/etc/redpanda/redpanda.yaml", overrides=["redpanda.node_id=2"])
layered.effective.redpanda.node_id   # 2
layered.pristine().redpanda.node_id  # whatever the file says
"""

import copy
import json
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import yaml
from pydantic import ValidationError

from pandaconf.config.defaults import DEFAULT_CONFIG_PATH, default_document
from pandaconf.config.overrides import ENV_PREFIX, EnvOverrides, deep_merge, set_flags_layer
from pandaconf.config.schema import Config
from pandaconf.config.tls import FileReader, read_local_file
from pandaconf.core.exceptions import (
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    InvalidOverrideError,
    SnapshotAlreadySetError,
)
from pandaconf.core.structured_logger import get_logger

logger = get_logger("ConfigLoader")

SEARCH_PATHS = ("redpanda.yaml", DEFAULT_CONFIG_PATH)


class LayeredConfig:
    """
    The effective document plus the write-once pristine snapshot.

    ``pristine()`` returns None when no file was ever loaded, which is
    different from a loaded empty file (a present document with zero values).
    """

    def __init__(self, effective: Config, path: Optional[str] = None):
        self.effective = effective
        self.path = path
        self._pristine: Optional[Config] = None

    @property
    def loaded(self) -> bool:
        return self._pristine is not None

    def set_pristine(self, document: Config) -> None:
        """
        Record the as-parsed document. Stores an independent deep copy.

        Raises:
            SnapshotAlreadySetError: If a snapshot was already recorded
        """
        if self._pristine is not None:
            raise SnapshotAlreadySetError(details={'path': self.path})
        self._pristine = document.model_copy(deep=True)

    def pristine(self) -> Optional[Config]:
        """A copy of the document as read from the file, or None"""
        if self._pristine is None:
            return None
        return self._pristine.model_copy(deep=True)


def decode_document(content: bytes, path: str) -> Dict[str, Any]:
    """
    Decode file bytes into a mapping; ``.json`` files as JSON, else YAML.

    Empty content decodes to an empty mapping.

    Raises:
        ConfigParseError: On decode errors or a non-mapping top level
    """
    try:
        text = content.decode('utf-8')
        if Path(path).suffix.lower() == '.json':
            data = json.loads(text) if text.strip() else None
        else:
            data = yaml.safe_load(text)
    except (UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigParseError(f"unable to decode {path}: {e}", details={'path': path}) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigParseError(
            f"{path}: top level must be a mapping, got {type(data).__name__}",
            details={'path': path},
        )
    return data


def _validate(data: Dict[str, Any], source: str) -> Config:
    try:
        return Config.from_dict(data)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigValidationError(
            f"invalid configuration in {source}:\n" + "\n".join(f"  - {m}" for m in errors),
            details={'source': source, 'errors': errors},
        ) from e


class ConfigLoader:
    """Load a configuration file and layer defaults and overrides onto it."""

    def __init__(self, read_file: FileReader = read_local_file, env_prefix: str = ENV_PREFIX):
        """
        Initialize the loader.

        Args:
            read_file: Capability returning the bytes at a path
            env_prefix: Prefix of environment override variables
        """
        self.read_file = read_file
        self.env_prefix = env_prefix

    def load(self, path: Optional[str | Path] = None, overrides: Sequence[str] = ()) -> LayeredConfig:
        """
        Load configuration from a file and all override layers.

        Args:
            path: Config file; when omitted, SEARCH_PATHS are tried in order
            overrides: ``key.path=value`` set-flags

        Returns:
            LayeredConfig with the pristine snapshot recorded if a file was read

        Raises:
            ConfigNotFoundError: An explicit path could not be read
            ConfigParseError: The file is not a YAML/JSON mapping
            ConfigValidationError: A value does not fit the model
            InvalidOverrideError: An override is malformed
        """
        if path is not None:
            source = str(path)
            content = self._read_explicit(source)
        else:
            source, content = self._search()

        if content is None:
            logger.info("No configuration file found, using defaults", searched=list(SEARCH_PATHS))
            return self.from_defaults(overrides)

        raw = decode_document(content, source)
        file_config = _validate(raw, source)
        logger.info(
            "Loaded configuration file",
            path=source,
            unknown_keys=len(file_config.other),
        )

        effective = self._layer(copy.deepcopy(raw), overrides, source)
        effective.config_file = source

        layered = LayeredConfig(effective, path=source)
        layered.set_pristine(file_config)
        return layered

    def from_defaults(self, overrides: Sequence[str] = ()) -> LayeredConfig:
        """An effective document built without any file; pristine() is None"""
        return LayeredConfig(self._layer({}, overrides, "defaults"))

    def _read_explicit(self, path: str) -> bytes:
        try:
            return self.read_file(path)
        except Exception as e:
            raise ConfigNotFoundError(path, details={'reason': str(e)}) from e

    def _search(self) -> tuple[str, Optional[bytes]]:
        for candidate in SEARCH_PATHS:
            try:
                return candidate, self.read_file(candidate)
            except Exception as e:
                logger.debug("Config file not readable", path=candidate, reason=str(e) or type(e).__name__)
        return "", None

    def _env_layer(self) -> Dict[str, Any]:
        try:
            return EnvOverrides(_env_prefix=self.env_prefix).as_layer()
        except ValueError as e:
            raise InvalidOverrideError(
                f"invalid {self.env_prefix}* environment override: {e}"
            ) from e

    def _layer(self, file_data: Dict[str, Any], overrides: Sequence[str], source: str) -> Config:
        merged = deep_merge(default_document(), file_data)

        env_layer = self._env_layer()
        if env_layer:
            merged = deep_merge(merged, env_layer)
            logger.debug("Applied environment overrides", keys=sorted(env_layer))

        if overrides:
            set_flags_layer(list(overrides), merged)
            logger.debug("Applied set-flag overrides", count=len(overrides))

        return _validate(merged, f"{source} with defaults and overrides")


def load_config(
    path: Optional[str | Path] = None,
    overrides: Sequence[str] = (),
    read_file: FileReader = read_local_file,
) -> LayeredConfig:
    """
    Load node configuration from all sources.

    This is the main entry point for loading configuration.

    Args:
        path: Optional config file path
        overrides: ``key.path=value`` set-flags
        read_file: Capability returning the bytes at a path

    Returns:
        LayeredConfig holding the effective document and pristine snapshot
    """
    return ConfigLoader(read_file=read_file).load(path, overrides)
