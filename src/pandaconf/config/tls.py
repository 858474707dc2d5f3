"""
TLS Materialization
===================

Turns a path-based TLS descriptor into a ready-to-use client
``ssl.SSLContext``. All credential bytes come from an injected file reader,
so the caller decides where "files" live (local disk, an in-memory map,
a mounted secret store).

Example:
--------
tls = resolve_kafka_tls(config.rpk)
client = materialize(tls, read_local_file)
if client is not None:
    sock = client.context.wrap_socket(raw, server_hostname=host)
"""

import os
import ssl
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional

from pandaconf.config.schema import ClientTLS, ServerTLS
from pandaconf.core.exceptions import (
    CredentialReadError,
    IncompleteKeyPairError,
    MalformedCredentialError,
)
from pandaconf.core.structured_logger import get_logger

logger = get_logger("TLS")

FileReader = Callable[[str], bytes]


def read_local_file(path: str) -> bytes:
    """Default file reader: the local file system"""
    return Path(path).read_bytes()


@dataclass(frozen=True)
class TLSClientConfig:
    """A materialized client TLS configuration"""
    context: ssl.SSLContext
    trusted_roots: Optional[bytes] = None
    certificate: Optional[bytes] = None

    @property
    def presents_certificate(self) -> bool:
        return self.certificate is not None


@dataclass(frozen=True)
class ListenerTLS:
    """TLS for one enabled listener; mutual auth is left to the listener"""
    name: Optional[str]
    config: TLSClientConfig
    require_client_auth: bool


def _read(read_file: FileReader, path: str) -> bytes:
    try:
        return read_file(path)
    except Exception as e:
        raise CredentialReadError(path, str(e) or type(e).__name__) from e


def _load_roots(context: ssl.SSLContext, data: bytes, path: str) -> None:
    cadata = data.decode('ascii', errors='replace') if b'-----BEGIN' in data else data
    try:
        context.load_verify_locations(cadata=cadata)
    except (ssl.SSLError, ValueError) as e:
        raise MalformedCredentialError(path, str(e)) from e


def _load_key_pair(context: ssl.SSLContext, cert: bytes, key: bytes, cert_path: str, key_path: str) -> None:
    # load_cert_chain only accepts file names.
    with tempfile.TemporaryDirectory(prefix='pandaconf-tls-') as tmp:
        cert_tmp = os.path.join(tmp, 'cert.pem')
        key_tmp = os.path.join(tmp, 'key.pem')
        for target, data in ((cert_tmp, cert), (key_tmp, key)):
            fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
            with os.fdopen(fd, 'wb') as handle:
                handle.write(data)
        try:
            context.load_cert_chain(cert_tmp, key_tmp)
        except ssl.SSLError as e:
            raise MalformedCredentialError(
                cert_path, str(e), details={'key_path': key_path}
            ) from e


def materialize(tls: Optional[ClientTLS], read_file: FileReader) -> Optional[TLSClientConfig]:
    """
    Build a client TLS configuration from a descriptor.

    Args:
        tls: Descriptor with optional key, cert and truststore paths
        read_file: Capability returning the bytes at a path

    Returns:
        None when no descriptor is given, otherwise a TLSClientConfig

    Raises:
        IncompleteKeyPairError: Only one of cert_file / key_file is set
        CredentialReadError: The reader failed for a configured path
        MalformedCredentialError: The TLS library rejected the bytes
    """
    if tls is None:
        return None

    cert_path = tls.cert_file or None
    key_path = tls.key_file or None
    if (cert_path is None) != (key_path is None):
        present, missing = ('cert_file', 'key_file') if key_path is None else ('key_file', 'cert_file')
        raise IncompleteKeyPairError(
            f"{missing} is required when {present} is set",
            details={'cert_file': cert_path, 'key_file': key_path},
        )

    roots = None
    if tls.truststore_file:
        roots = _read(read_file, tls.truststore_file)

    certificate = None
    key = None
    if cert_path is not None:
        certificate = _read(read_file, cert_path)
        key = _read(read_file, key_path)

    if roots is None:
        context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)
        logger.debug("No truststore configured, using system trust roots", cert_file=cert_path)
    else:
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        _load_roots(context, roots, tls.truststore_file)

    if certificate is not None:
        _load_key_pair(context, certificate, key, cert_path, key_path)

    return TLSClientConfig(context=context, trusted_roots=roots, certificate=certificate)


def materialize_listener(server_tls: Optional[ServerTLS], read_file: FileReader) -> Optional[ListenerTLS]:
    """
    Materialize a listener's descriptor if it is enabled.

    ``require_client_auth`` is passed through for the listener setup to act
    on; it does not change the context built here.
    """
    if server_tls is None or not server_tls.enabled:
        return None
    config = materialize(server_tls, read_file)
    return ListenerTLS(
        name=server_tls.name,
        config=config,
        require_client_auth=server_tls.require_client_auth,
    )


def find_listener_tls(tls_list: Iterable[ServerTLS], name: Optional[str]) -> Optional[ServerTLS]:
    """Descriptor whose name matches a listener name; unnamed matches unnamed"""
    wanted = name or None
    for server_tls in tls_list:
        if (server_tls.name or None) == wanted:
            return server_tls
    return None
