"""Configuration system for pandaconf.

Layers (lowest to highest priority):
1. Defaults - built-in table (``pandaconf.config.defaults``)
2. Config file - redpanda.yaml (YAML or JSON)
3. Environment Variables - PANDACONF_* prefixed, ``__`` for nesting
4. Set-flags - ``key.path=value`` passed on the command line

Example Usage:
    from pandaconf.config import (
        load_config, materialize, read_local_file, resolve_kafka_tls,
    )

    layered = load_config("/etc/redpanda/redpanda.yaml")
    config = layered.effective

    print(config.redpanda.kafka_api[0].port)  # 9092
    print(layered.pristine())                  # exactly what the file says

    tls = materialize(resolve_kafka_tls(config.rpk), read_local_file)
"""

from .compat import resolve, resolve_admin_tls, resolve_kafka_sasl, resolve_kafka_tls
from .defaults import default_config, default_document
from .loader import ConfigLoader, LayeredConfig, decode_document, load_config
from .overrides import EnvOverrides, apply_override, deep_merge, parse_set_flag
from .paths import PID_FILE_NAME, pid_file
from .schema import (
    SASL,
    TLS,
    ClientTLS,
    Config,
    ConfigBlock,
    Endpoint,
    KafkaClient,
    NamedEndpoint,
    Pandaproxy,
    RedpandaConfig,
    RpkAdminAPI,
    RpkConfig,
    RpkKafkaAPI,
    SchemaRegistry,
    SeedServer,
    ServerTLS,
)
from .tls import (
    FileReader,
    ListenerTLS,
    TLSClientConfig,
    find_listener_tls,
    materialize,
    materialize_listener,
    read_local_file,
)

__all__ = [
    # Document model
    "Config",
    "ConfigBlock",
    "RedpandaConfig",
    "RpkConfig",
    "RpkKafkaAPI",
    "RpkAdminAPI",
    "Pandaproxy",
    "SchemaRegistry",
    "KafkaClient",
    "Endpoint",
    "NamedEndpoint",
    "SeedServer",
    "ClientTLS",
    "TLS",
    "ServerTLS",
    "SASL",
    # Loader
    "ConfigLoader",
    "LayeredConfig",
    "load_config",
    "decode_document",
    # Defaults and overrides
    "default_config",
    "default_document",
    "EnvOverrides",
    "apply_override",
    "deep_merge",
    "parse_set_flag",
    # TLS
    "FileReader",
    "ListenerTLS",
    "TLSClientConfig",
    "find_listener_tls",
    "materialize",
    "materialize_listener",
    "read_local_file",
    # Deprecated field resolution
    "resolve",
    "resolve_admin_tls",
    "resolve_kafka_sasl",
    "resolve_kafka_tls",
    # Derived values
    "PID_FILE_NAME",
    "pid_file",
]
