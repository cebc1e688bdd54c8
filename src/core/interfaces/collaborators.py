"""Contratos de los colaboradores externos.

Por qué Protocol:
- El Core (resolver, enrichers, dispatcher) depende de estos contratos y no
  de `httpx`; los adaptadores concretos viven en `adapters/`.
- En tests se sustituyen por `AsyncMock` sin herencia.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from core.domain.models import (
    DocumentationOrganization,
    DomainRecord,
    EmailMessage,
    SslCertificateRecord,
)


@runtime_checkable
class PsaClient(Protocol):
    """API REST del PSA (Autotask).

    Los métodos lanzan `PsaApiError` ante respuestas no exitosas.
    """

    async def probe(self) -> str:
        """Llamada autenticada ligera; devuelve la línea de estado."""

        ...

    async def query(
        self,
        entity: str,
        *,
        filters: list[dict[str, Any]],
        include_fields: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        """`POST <entity>/query`; devuelve `items`."""

        ...

    async def create(self, entity: str, payload: dict[str, Any]) -> dict[str, Any]:
        """`POST <entity>`; devuelve el cuerpo (p.ej. `{"itemId": 123}`)."""

        ...


@runtime_checkable
class DocumentationClient(Protocol):
    """API del sistema de documentación (IT Glue).

    Los métodos lanzan `DocumentationApiError` ante respuestas no exitosas.
    """

    async def find_organization(self, name: str) -> DocumentationOrganization | None:
        ...

    async def list_domains(self, organization_id: str) -> list[DomainRecord]:
        ...

    async def list_ssl_expirations(self, organization_id: str) -> list[SslCertificateRecord]:
        ...


@runtime_checkable
class EmailSender(Protocol):
    async def send(self, message: EmailMessage) -> None:
        """Envía un email; lanza `EmailDeliveryError` si falla."""

        ...


@runtime_checkable
class HostInspector(Protocol):
    """Consultas en vivo sobre un hostname (DNS y TLS)."""

    async def resolve_ip(self, hostname: str) -> str | None:
        ...

    async def lookup_issuer(self, hostname: str) -> str | None:
        """Organización emisora del certificado hoja, si la hay."""

        ...
