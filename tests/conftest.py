"""
Pytest configuration for pandaconf tests — shared fixtures for config
documents, in-memory file readers and generated TLS material.
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

# =============================================================================
# SHARED FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep PANDACONF_* variables from the host out of every test."""
    for key in list(os.environ):
        if key.upper().startswith("PANDACONF_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_reader() -> Callable[[dict], Callable[[str], bytes]]:
    """Build a file reader backed by a dict of path -> bytes."""

    def _make(files: dict) -> Callable[[str], bytes]:
        def read(path: str) -> bytes:
            if path not in files:
                raise FileNotFoundError(f"no such file: {path}")
            data = files[path]
            return data.encode() if isinstance(data, str) else data

        return read

    return _make


@pytest.fixture
def sample_yaml() -> str:
    """A small but complete node config with unknown keys at several levels."""
    return """\
node_uuid: 5f1e3c1a
redpanda:
  data_directory: /var/lib/node
  node_id: 1
  rack: rack-a
  seed_servers:
    - host:
        address: 10.0.0.2
        port: 33145
  rpc_server:
    address: 0.0.0.0
    port: 33145
  kafka_api:
    - address: 0.0.0.0
      port: 9092
      name: internal
    - address: 0.0.0.0
      port: 19092
      name: external
  kafka_api_tls:
    - name: external
      key_file: /etc/tls/node.key
      cert_file: /etc/tls/node.crt
      truststore_file: /etc/tls/ca.crt
      enabled: true
      require_client_auth: true
  admin:
    - address: 0.0.0.0
      port: 9644
  developer_mode: false
  log_segment_size: 134217728
  tiered_storage:
    bucket: archive
    options: [b, a, c]
rpk:
  kafka_api:
    brokers: ["10.0.0.2:9092"]
  tune_network: true
  future_tuner: on
extra_feature_flag: true
"""


# =============================================================================
# TLS MATERIAL
# =============================================================================


def _name(common_name: str) -> x509.Name:
    return x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])


def _pem_key(key) -> bytes:
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )


@pytest.fixture(scope="session")
def tls_material() -> dict:
    """A CA plus a leaf certificate/key issued by it, all PEM bytes."""
    now = datetime.now(timezone.utc)

    ca_key = ec.generate_private_key(ec.SECP256R1())
    ca_cert = (
        x509.CertificateBuilder()
        .subject_name(_name("pandaconf-test-ca"))
        .issuer_name(_name("pandaconf-test-ca"))
        .public_key(ca_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(ca_key, hashes.SHA256())
    )

    leaf_key = ec.generate_private_key(ec.SECP256R1())
    leaf_cert = (
        x509.CertificateBuilder()
        .subject_name(_name("node-1"))
        .issuer_name(ca_cert.subject)
        .public_key(leaf_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(days=1))
        .not_valid_after(now + timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=False, path_length=None), critical=True)
        .sign(ca_key, hashes.SHA256())
    )

    other_key = ec.generate_private_key(ec.SECP256R1())

    return {
        "ca": ca_cert.public_bytes(serialization.Encoding.PEM),
        "ca_der": ca_cert.public_bytes(serialization.Encoding.DER),
        "cert": leaf_cert.public_bytes(serialization.Encoding.PEM),
        "key": _pem_key(leaf_key),
        "other_key": _pem_key(other_key),
    }


@pytest.fixture
def tls_files(tls_material) -> dict:
    """TLS material laid out at the paths used by sample_yaml."""
    return {
        "/etc/tls/ca.crt": tls_material["ca"],
        "/etc/tls/node.crt": tls_material["cert"],
        "/etc/tls/node.key": tls_material["key"],
    }
