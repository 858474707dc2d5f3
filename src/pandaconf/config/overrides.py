"""
Configuration Overrides
=======================

Layers applied on top of the file:

1. Environment variables with the PANDACONF_ prefix, nested with ``__``:
     PANDACONF_REDPANDA__NODE_ID=3
     PANDACONF_RPK__KAFKA_API__BROKERS='["10.0.0.1:9092"]'
     PANDACONF_CLUSTER_ID=prod-east
2. ``key.path=value`` set-flags from the command line (highest priority):
     redpanda.developer_mode=false
     redpanda.kafka_api.0.port=19092

Values are decoded as YAML scalars, so ``3`` is an int and ``false`` a bool.
"""

from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pandaconf.core.exceptions import InvalidOverrideError

ENV_PREFIX = "PANDACONF_"


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with override taking precedence.

    A None in override (an empty YAML key) leaves an existing base value alone.
    """
    result = base.copy()
    for key, value in override.items():
        if value is None and result.get(key) is not None:
            continue
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _decode_scalar(value: str) -> Any:
    try:
        return yaml.safe_load(value)
    except yaml.YAMLError:
        return value


def _decode_leaves(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _decode_leaves(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_decode_leaves(item) for item in value]
    if isinstance(value, str):
        return _decode_scalar(value)
    return value


def parse_set_flag(flag: str) -> Tuple[str, Any]:
    """
    Split a ``key.path=value`` flag.

    Raises:
        InvalidOverrideError: If there is no ``=`` or the key is empty
    """
    key, sep, raw = flag.partition('=')
    key = key.strip()
    if not sep or not key:
        raise InvalidOverrideError(
            f"override {flag!r} must look like key.path=value",
            details={'override': flag},
        )
    if any(not part for part in key.split('.')):
        raise InvalidOverrideError(f"override key {key!r} has an empty segment", details={'override': flag})
    return key, _decode_scalar(raw)


def apply_override(document: Dict[str, Any], key: str, value: Any) -> None:
    """
    Set ``value`` at dotted ``key`` inside a plain mapping, in place.

    Missing mappings along the way are created. Numeric segments index
    into existing lists.
    """
    parts = key.split('.')
    node: Any = document
    for position, part in enumerate(parts):
        last = position == len(parts) - 1
        if isinstance(node, list):
            if not part.isdigit() or int(part) >= len(node):
                raise InvalidOverrideError(
                    f"override {key!r}: index {part!r} is out of range",
                    details={'override': key},
                )
            index = int(part)
            if last:
                node[index] = value
            else:
                if not isinstance(node[index], (dict, list)):
                    node[index] = {}
                node = node[index]
        elif isinstance(node, dict):
            if last:
                node[part] = value
            else:
                if not isinstance(node.get(part), (dict, list)):
                    node[part] = {}
                node = node[part]
        else:
            raise InvalidOverrideError(
                f"override {key!r}: {'.'.join(parts[:position])!r} is not a mapping",
                details={'override': key},
            )


class EnvOverrides(BaseSettings):
    """Overrides read from PANDACONF_* environment variables"""

    node_uuid: Optional[str] = None
    organization: Optional[str] = None
    license_key: Optional[str] = None
    cluster_id: Optional[str] = None
    redpanda: Dict[str, Any] = Field(default_factory=dict)
    rpk: Dict[str, Any] = Field(default_factory=dict)
    pandaproxy: Dict[str, Any] = Field(default_factory=dict)
    pandaproxy_client: Dict[str, Any] = Field(default_factory=dict)
    schema_registry: Dict[str, Any] = Field(default_factory=dict)
    schema_registry_client: Dict[str, Any] = Field(default_factory=dict)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_nested_delimiter='__',
        extra='ignore',
    )

    def as_layer(self) -> Dict[str, Any]:
        """Only the values actually set, ready to merge over a document"""
        layer: Dict[str, Any] = {}
        for name in type(self).model_fields:
            value = getattr(self, name)
            if value is None or value == {}:
                continue
            layer[name] = value if isinstance(value, str) else _decode_leaves(value)
        return layer


def set_flags_layer(flags: List[str], document: Dict[str, Any]) -> Dict[str, Any]:
    """Apply every set-flag to ``document`` in place and return it"""
    for flag in flags:
        key, value = parse_set_flag(flag)
        apply_override(document, key, value)
    return document
