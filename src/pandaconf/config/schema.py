"""
Configuration Document Model
============================

Pydantic models for the node configuration file (``redpanda.yaml``).

Every block keeps the keys it does not model in its side-map
(``extra='allow'``), so reading and re-emitting a document never drops
configuration this version does not understand.

Field defaults are zero values on purpose: the default table lives in
``pandaconf.config.defaults`` and is layered on by the loader, so a document
parsed straight from a file only holds what the file says.
"""

import json
from typing import Any, ClassVar, Dict, List, Optional

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    ValidationInfo,
    field_validator,
    model_serializer,
)

from pandaconf.config.paths import pid_file


def _is_empty(value: Any) -> bool:
    if isinstance(value, ConfigBlock):
        return value.is_zero()
    return not value


class ConfigBlock(BaseModel):
    """Base for every configuration block"""

    # Fields dropped from output when empty or zero, like an omitempty tag.
    omit_empty: ClassVar[frozenset] = frozenset()

    model_config = ConfigDict(extra='allow', populate_by_name=True)

    @property
    def other(self) -> Dict[str, Any]:
        """Keys found at this level that no field claims, in input order."""
        return self.model_extra if self.model_extra is not None else {}

    def is_zero(self) -> bool:
        """
        True when every field holds its default and there are no unknown keys.

        A present optional sub-block (even an empty one) is not a default.
        """
        if self.other:
            return False
        for name, field in type(self).model_fields.items():
            if getattr(self, name) != field.get_default(call_default_factory=True):
                return False
        return True

    @field_validator("*", mode="before")
    @classmethod
    def _null_is_zero(cls, v: Any, info: ValidationInfo) -> Any:
        # An empty YAML key (`rpk:`) decodes to None; treat it as the zero value.
        if v is not None or info.field_name is None:
            return v
        field = cls.model_fields[info.field_name]
        if field.default is None:
            return v
        return field.get_default(call_default_factory=True)

    @model_serializer(mode='wrap')
    def _drop_absent(self, handler: SerializerFunctionWrapHandler, info: SerializationInfo) -> Dict[str, Any]:
        data = handler(self)
        for name, field in type(self).model_fields.items():
            key = field.alias if (info.by_alias and field.alias) else name
            if key not in data:
                continue
            if data[key] is None or (name in self.omit_empty and _is_empty(getattr(self, name))):
                del data[key]
        return data


class Endpoint(ConfigBlock):
    """A host/port pair; an empty address means the bind-all default"""
    address: str = Field("", description="Host name or IP address")
    port: int = Field(0, description="TCP port")


class NamedEndpoint(Endpoint):
    """An endpoint with an optional listener name"""
    name: Optional[str] = Field(None, description="Listener name, e.g. internal / external")


class SeedServer(ConfigBlock):
    """A cluster peer used for initial discovery"""
    host: Endpoint = Field(default_factory=Endpoint)


class ClientTLS(ConfigBlock):
    """TLS credentials for a process acting as a TLS client; paths only"""
    key_file: Optional[str] = Field(None, description="Path to the PEM private key")
    cert_file: Optional[str] = Field(None, description="Path to the PEM certificate")
    truststore_file: Optional[str] = Field(None, description="Path to the CA bundle")


# Blocks such as rpk.tls and rpk.kafka_api.tls name this type plain "tls".
TLS = ClientTLS


class ServerTLS(ClientTLS):
    """TLS posture of a listener; disabled means plaintext whatever else is set"""
    name: Optional[str] = Field(None, description="Listener name this descriptor applies to")
    enabled: bool = Field(False, description="Serve TLS on the listener")
    require_client_auth: bool = Field(False, description="Require mutual TLS")

    omit_empty: ClassVar[frozenset] = frozenset({'enabled', 'require_client_auth'})


class SASL(ConfigBlock):
    """SASL credentials used by the CLI"""
    user: Optional[str] = Field(None, description="SASL user name")
    password: Optional[str] = Field(None, description="SASL password")
    mechanism: Optional[str] = Field(None, alias='type', description="SASL mechanism, e.g. SCRAM-SHA-256")


class KafkaClient(ConfigBlock):
    """Kafka client settings used by proxy and schema registry front-ends"""
    brokers: List[Endpoint] = Field(default_factory=list, description="Bootstrap brokers")
    broker_tls: ServerTLS = Field(default_factory=ServerTLS, description="TLS toward the brokers")
    sasl_mechanism: Optional[str] = Field(None, description="SASL mechanism")
    scram_username: Optional[str] = Field(None, description="SCRAM user name")
    scram_password: Optional[str] = Field(None, description="SCRAM password")

    omit_empty: ClassVar[frozenset] = frozenset({'brokers', 'broker_tls'})


class RedpandaConfig(ConfigBlock):
    """Core node settings (the ``redpanda`` block)"""
    data_directory: str = Field("", description="Data directory")
    node_id: int = Field(0, description="Node id within the cluster")
    rack: Optional[str] = Field(None, description="Rack label")
    seed_servers: List[SeedServer] = Field(default_factory=list, description="Discovery peers")
    rpc_server: Endpoint = Field(default_factory=Endpoint, description="Internal RPC listener")
    rpc_server_tls: List[ServerTLS] = Field(default_factory=list)
    kafka_api: List[NamedEndpoint] = Field(default_factory=list, description="Kafka API listeners")
    kafka_api_tls: List[ServerTLS] = Field(default_factory=list)
    admin: List[NamedEndpoint] = Field(default_factory=list, description="Admin API listeners")
    admin_api_tls: List[ServerTLS] = Field(default_factory=list)
    coproc_supervisor_server: Endpoint = Field(default_factory=Endpoint)
    admin_api_doc_dir: Optional[str] = None
    dashboard_dir: Optional[str] = None
    cloud_storage_cache_directory: Optional[str] = None
    advertised_rpc_api: Optional[Endpoint] = None
    advertised_kafka_api: List[NamedEndpoint] = Field(default_factory=list)
    developer_mode: bool = Field(False, description="Relax production checks")

    omit_empty: ClassVar[frozenset] = frozenset({
        'rpc_server_tls',
        'kafka_api_tls',
        'admin_api_tls',
        'coproc_supervisor_server',
        'advertised_kafka_api',
    })


class Pandaproxy(ConfigBlock):
    """HTTP proxy listeners (the ``pandaproxy`` block)"""
    pandaproxy_api: List[NamedEndpoint] = Field(default_factory=list)
    pandaproxy_api_tls: List[ServerTLS] = Field(default_factory=list)
    advertised_pandaproxy_api: List[NamedEndpoint] = Field(default_factory=list)

    omit_empty: ClassVar[frozenset] = frozenset({
        'pandaproxy_api',
        'pandaproxy_api_tls',
        'advertised_pandaproxy_api',
    })


class SchemaRegistry(ConfigBlock):
    """Schema registry listeners (the ``schema_registry`` block)"""
    schema_registry_api: List[NamedEndpoint] = Field(default_factory=list)
    schema_registry_api_tls: List[ServerTLS] = Field(default_factory=list)
    schema_registry_replication_factor: Optional[int] = None

    omit_empty: ClassVar[frozenset] = frozenset({'schema_registry_api', 'schema_registry_api_tls'})


class RpkKafkaAPI(ConfigBlock):
    """Kafka API settings used by the CLI"""
    brokers: List[str] = Field(default_factory=list, description="host:port seeds")
    tls: Optional[ClientTLS] = None
    sasl: Optional[SASL] = None

    omit_empty: ClassVar[frozenset] = frozenset({'brokers'})


class RpkAdminAPI(ConfigBlock):
    """Admin API settings used by the CLI"""
    addresses: List[str] = Field(default_factory=list, description="host:port admin endpoints")
    tls: Optional[ClientTLS] = None

    omit_empty: ClassVar[frozenset] = frozenset({'addresses'})


class RpkConfig(ConfigBlock):
    """CLI settings and host tuning toggles (the ``rpk`` block)"""
    # Deprecated: superseded by kafka_api.tls / admin_api.tls.
    tls: Optional[ClientTLS] = None
    # Deprecated: superseded by kafka_api.sasl.
    sasl: Optional[SASL] = None

    kafka_api: RpkKafkaAPI = Field(default_factory=RpkKafkaAPI)
    admin_api: RpkAdminAPI = Field(default_factory=RpkAdminAPI)
    additional_start_flags: List[str] = Field(default_factory=list)
    enable_usage_stats: bool = False
    tune_network: bool = False
    tune_disk_scheduler: bool = False
    tune_disk_nomerges: bool = False
    tune_disk_write_cache: bool = False
    tune_disk_irq: bool = False
    tune_fstrim: bool = False
    tune_cpu: bool = False
    tune_aio_events: bool = False
    tune_clocksource: bool = False
    tune_swappiness: bool = False
    tune_transparent_hugepages: bool = False
    enable_memory_locking: bool = False
    tune_coredump: bool = False
    coredump_dir: Optional[str] = None
    tune_ballast_file: bool = False
    ballast_file_path: Optional[str] = None
    ballast_file_size: Optional[str] = None
    well_known_io: Optional[str] = None
    overprovisioned: bool = False
    smp: Optional[int] = None

    omit_empty: ClassVar[frozenset] = frozenset({'kafka_api', 'admin_api', 'additional_start_flags'})


class Config(ConfigBlock):
    """
    The node configuration document.

    Holds every subsystem block plus the side-map of unrecognized top-level
    keys. The snapshot of what a file originally said is kept next to this
    document by ``LayeredConfig``, not inside it.
    """

    node_uuid: Optional[str] = None
    organization: Optional[str] = None
    license_key: Optional[str] = None
    cluster_id: Optional[str] = None
    config_file: str = Field("", description="Path of the file this document came from")
    redpanda: RedpandaConfig = Field(default_factory=RedpandaConfig)
    rpk: RpkConfig = Field(default_factory=RpkConfig)
    pandaproxy: Optional[Pandaproxy] = None
    pandaproxy_client: Optional[KafkaClient] = None
    schema_registry: Optional[SchemaRegistry] = None
    schema_registry_client: Optional[KafkaClient] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Validate a decoded mapping into a document"""
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten typed fields and side-maps back into one mapping"""
        return self.model_dump(by_alias=True)

    def to_yaml(self) -> str:
        """Serialize as YAML, keeping key order"""
        return yaml.safe_dump(self.to_dict(), sort_keys=False, default_flow_style=False)

    def to_json(self, indent: int = 2) -> str:
        """Serialize as JSON"""
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def get_nested(self, key: str, default: Any = None) -> Any:
        """
        Look up a value by dotted path in the serialized document.

        Side-map keys are reachable like any other key; numeric segments
        index into lists.

        Args:
            key: Dot-separated key path (e.g., "redpanda.kafka_api.0.port")
            default: Value returned when the path does not resolve

        Returns:
            The value at the path or default
        """
        node: Any = self.to_dict()
        for part in key.split('.'):
            if isinstance(node, dict) and part in node:
                node = node[part]
            elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
                node = node[int(part)]
            else:
                return default
        return node

    def pid_file(self) -> str:
        """Lock file path derived from the current data directory"""
        return pid_file(self)


__all__ = [
    'ClientTLS',
    'Config',
    'ConfigBlock',
    'Endpoint',
    'KafkaClient',
    'NamedEndpoint',
    'Pandaproxy',
    'RedpandaConfig',
    'RpkAdminAPI',
    'RpkConfig',
    'RpkKafkaAPI',
    'SASL',
    'SchemaRegistry',
    'SeedServer',
    'ServerTLS',
    'TLS',
]
