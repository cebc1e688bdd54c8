"""Consultas en vivo sobre un hostname: DNS y emisor del certificado TLS.

Implementación:
- DNS con `getaddrinfo` del event loop (primera dirección devuelta).
- Handshake TLS con `asyncio.open_connection`; el certificado hoja se lee en
  DER sin verificación (un certificado a punto de expirar o mal instalado
  sigue siendo inspeccionable) y se parsea con `cryptography`.

Cada consulta es un único intento acotado por `tls_timeout_seconds`; los
fallos se lanzan como `HostLookupError`.
"""

from __future__ import annotations

import asyncio
import socket
import ssl

from cryptography import x509
from cryptography.x509.oid import NameOID

from core.config import AppSettings
from core.errors import HostLookupError

TLS_PORT = 443


def issuer_organization_from_der(der_cert: bytes) -> str | None:
    """Campo `O` del emisor de un certificado DER, si existe."""

    try:
        cert = x509.load_der_x509_certificate(der_cert)
    except ValueError as exc:
        raise HostLookupError(f"Invalid certificate: {exc}") from exc

    attrs = cert.issuer.get_attributes_for_oid(NameOID.ORGANIZATION_NAME)
    if not attrs:
        return None
    value = attrs[0].value
    return value if isinstance(value, str) else value.decode("utf-8", "replace")


def _inspection_context() -> ssl.SSLContext:
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


class SocketHostInspector:
    def __init__(self, settings: AppSettings | None = None, *, port: int = TLS_PORT) -> None:
        self._settings = settings or AppSettings()
        self._port = port

    async def resolve_ip(self, hostname: str) -> str | None:
        loop = asyncio.get_running_loop()
        try:
            infos = await asyncio.wait_for(
                loop.getaddrinfo(hostname, None, type=socket.SOCK_STREAM),
                timeout=self._settings.tls_timeout_seconds,
            )
        except (OSError, asyncio.TimeoutError, UnicodeError) as exc:
            raise HostLookupError(f"DNS lookup failed for {hostname}: {exc}") from exc

        for _family, _type, _proto, _canonname, sockaddr in infos:
            return str(sockaddr[0])
        return None

    async def fetch_peer_certificate(self, hostname: str) -> bytes:
        """Certificado hoja (DER) presentado por `hostname:443`."""

        try:
            _reader, writer = await asyncio.wait_for(
                asyncio.open_connection(
                    hostname,
                    self._port,
                    ssl=_inspection_context(),
                    server_hostname=hostname,
                ),
                timeout=self._settings.tls_timeout_seconds,
            )
        except (OSError, ssl.SSLError, asyncio.TimeoutError, UnicodeError) as exc:
            raise HostLookupError(f"TLS handshake failed for {hostname}: {exc}") from exc

        try:
            ssl_object = writer.get_extra_info("ssl_object")
            der_cert = ssl_object.getpeercert(binary_form=True) if ssl_object else None
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except (OSError, ssl.SSLError):
                pass

        if not der_cert:
            raise HostLookupError(f"No certificate received from {hostname}")
        return der_cert

    async def lookup_issuer(self, hostname: str) -> str | None:
        der_cert = await self.fetch_peer_certificate(hostname)
        return issuer_organization_from_der(der_cert)
