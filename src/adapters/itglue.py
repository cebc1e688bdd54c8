"""Cliente REST de IT Glue (JSON:API).

Solo expone las tres lecturas que usa el bridge: búsqueda de organización,
dominios y expiraciones de certificados SSL.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from adapters.http_client import build_async_client, describe_error_response
from core.config import AppSettings
from core.domain.models import DocumentationOrganization, DomainRecord, SslCertificateRecord
from core.errors import DocumentationApiError

SSL_RESOURCE_TYPE = "SslCertificate"


def _resources(payload: Any) -> list[dict[str, Any]]:
    data = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(data, list):
        return []
    return [item for item in data if isinstance(item, dict)]


def _attributes(resource: dict[str, Any]) -> dict[str, Any]:
    attributes = resource.get("attributes")
    return attributes if isinstance(attributes, dict) else {}


class ITGlueClient:
    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        headers = {
            "x-api-key": self._settings.itg_api_key or "",
            "Content-Type": "application/vnd.api+json",
        }
        async with build_async_client(
            self._settings,
            base_url=self._settings.itg_base_url,
            extra_headers=headers,
            transport=self._transport,
        ) as client:
            response = await client.get(path, params=params)

        if not response.is_success:
            raise DocumentationApiError(describe_error_response(response), status_code=response.status_code)
        return response.json()

    async def find_organization(self, name: str) -> DocumentationOrganization | None:
        payload = await self._get("/organizations", {"filter[name]": name})
        resources = _resources(payload)
        if not resources:
            return None
        first = resources[0]
        attributes = _attributes(first)
        return DocumentationOrganization(
            id=str(first.get("id")),
            name=attributes.get("name") or "",
            short_name=attributes.get("short-name") or None,
        )

    async def list_domains(self, organization_id: str) -> list[DomainRecord]:
        payload = await self._get(
            f"/organizations/{organization_id}/relationships/domains",
            {"page[size]": self._settings.documentation_page_size},
        )
        records: list[DomainRecord] = []
        for resource in _resources(payload):
            attributes = _attributes(resource)
            try:
                records.append(
                    DomainRecord(
                        name=attributes.get("name") or "",
                        expires_on=attributes.get("expires-on"),
                        registrar_name=attributes.get("registrar-name"),
                        notes=attributes.get("notes"),
                    )
                )
            except ValidationError:
                continue
        return records

    async def list_ssl_expirations(self, organization_id: str) -> list[SslCertificateRecord]:
        payload = await self._get(
            f"/organizations/{organization_id}/relationships/expirations",
            {
                "filter[resource_type_name]": SSL_RESOURCE_TYPE,
                "page[size]": self._settings.documentation_page_size,
            },
        )
        records: list[SslCertificateRecord] = []
        for resource in _resources(payload):
            attributes = _attributes(resource)
            try:
                records.append(
                    SslCertificateRecord(
                        resource_name=attributes.get("resource-name") or "",
                        expires_on=attributes.get("expiration-date"),
                    )
                )
            except ValidationError:
                continue
        return records
