"""
Deprecated Field Resolution
===========================

``rpk.tls`` and ``rpk.sasl`` predate the per-API ``rpk.kafka_api`` and
``rpk.admin_api`` blocks and are still honored. Resolution happens when a
consumer asks, never at load time, so the pristine snapshot is untouched.

Order for a given API:
1. the per-API value, if present and not empty
2. the legacy top-level value, if present
3. the per-API value, if present but empty (TLS with system defaults)
4. nothing configured

Step 3 is an extension over a plain two-way fallback: an empty per-API block
written with nothing under it (`tls: {}`) still turns TLS on with system
roots, instead of being read as "no TLS configured".

Nothing here checks that the two SASL mechanisms agree.
"""

from typing import Optional, TypeVar

from pandaconf.config.schema import SASL, ClientTLS, ConfigBlock, RpkConfig

_Block = TypeVar('_Block', bound=ConfigBlock)


def _is_set(block: ConfigBlock) -> bool:
    for name in type(block).model_fields:
        if getattr(block, name):
            return True
    return bool(block.other)


def resolve(per_api: Optional[_Block], legacy: Optional[_Block]) -> Optional[_Block]:
    """Pick between a per-API block and its deprecated top-level counterpart"""
    if per_api is not None and _is_set(per_api):
        return per_api
    if legacy is not None:
        return legacy
    return per_api


def resolve_kafka_tls(rpk: RpkConfig) -> Optional[ClientTLS]:
    """TLS settings the CLI uses for the Kafka API"""
    return resolve(rpk.kafka_api.tls, rpk.tls)


def resolve_admin_tls(rpk: RpkConfig) -> Optional[ClientTLS]:
    """TLS settings the CLI uses for the Admin API"""
    return resolve(rpk.admin_api.tls, rpk.tls)


def resolve_kafka_sasl(rpk: RpkConfig) -> Optional[SASL]:
    """SASL settings the CLI uses for the Kafka API"""
    return resolve(rpk.kafka_api.sasl, rpk.sasl)
