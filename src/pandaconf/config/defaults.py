"""Built-in default values layered under every loaded document."""

import copy
from typing import Any, Dict

from pandaconf.config.schema import Config

DEFAULT_CONFIG_PATH = "/etc/redpanda/redpanda.yaml"
DEFAULT_DATA_DIRECTORY = "/var/lib/redpanda/data"

_DEFAULTS: Dict[str, Any] = {
    'config_file': DEFAULT_CONFIG_PATH,
    'redpanda': {
        'data_directory': DEFAULT_DATA_DIRECTORY,
        'node_id': 0,
        'seed_servers': [],
        'rpc_server': {'address': '0.0.0.0', 'port': 33145},
        'kafka_api': [{'address': '0.0.0.0', 'port': 9092}],
        'admin': [{'address': '0.0.0.0', 'port': 9644}],
        'developer_mode': True,
    },
    'rpk': {
        'coredump_dir': '/var/lib/redpanda/coredump',
    },
    'pandaproxy': {},
    'schema_registry': {},
}


def default_document() -> Dict[str, Any]:
    """A fresh copy of the default table as a plain mapping"""
    return copy.deepcopy(_DEFAULTS)


def default_config() -> Config:
    """The default table validated into a document"""
    return Config.from_dict(default_document())
