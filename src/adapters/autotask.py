"""Cliente REST del PSA (Autotask).

Implementación:
- Descubre la zona del usuario API (`zoneInformation`) una vez por instancia.
- `POST <Entity>/query` con filtros Autotask y `includeFields`.
- `POST <Entity>` para crear (devuelve `itemId`).

Errores HTTP se traducen a `PsaApiError`; este módulo no decide qué hacer
con ellos.
"""

from __future__ import annotations

from typing import Any

import httpx

from adapters.http_client import build_async_client, describe_error_response
from core.config import AppSettings
from core.errors import PsaApiError

API_VERSION = "1.0"


def _json_object(response: httpx.Response) -> dict[str, Any]:
    data = response.json()
    if not isinstance(data, dict):
        raise PsaApiError("Unexpected response shape", status_code=response.status_code)
    return data


class AutotaskClient:
    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport
        self._zone_url: str | None = None

    def _auth_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "ApiIntegrationcode": self._settings.autotask_integration_code or "",
            "UserName": self._settings.autotask_user or "",
            "Secret": self._settings.autotask_secret or "",
        }

    async def zone_url(self) -> str:
        """URL base de la zona, p.ej. `https://webservices15.autotask.net/atservicesrest/`."""

        if self._zone_url:
            return self._zone_url

        async with build_async_client(self._settings, transport=self._transport) as client:
            response = await client.get(
                self._settings.psa_zone_lookup_url,
                params={"user": self._settings.autotask_user or ""},
            )
        if not response.is_success:
            raise PsaApiError(describe_error_response(response), status_code=response.status_code)

        url = _json_object(response).get("url")
        if not isinstance(url, str) or not url:
            raise PsaApiError("Zone information did not include a url.", status_code=response.status_code)
        self._zone_url = url if url.endswith("/") else url + "/"
        return self._zone_url

    async def _request(self, method: str, path: str, *, json: Any = None) -> httpx.Response:
        base = f"{await self.zone_url()}V{API_VERSION}/"
        async with build_async_client(
            self._settings,
            base_url=base,
            extra_headers=self._auth_headers(),
            transport=self._transport,
        ) as client:
            response = await client.request(method, path, json=json)

        if not response.is_success:
            raise PsaApiError(describe_error_response(response), status_code=response.status_code)
        return response

    async def probe(self) -> str:
        response = await self._request("GET", "Companies/entityInformation")
        return f"{response.status_code} - {response.reason_phrase}"

    async def query(
        self,
        entity: str,
        *,
        filters: list[dict[str, Any]],
        include_fields: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        body: dict[str, Any] = {"filter": filters}
        if include_fields:
            body["includeFields"] = include_fields
        response = await self._request("POST", f"{entity}/query", json=body)
        items = _json_object(response).get("items")
        if not isinstance(items, list):
            return []
        return [item for item in items if isinstance(item, dict)]

    async def create(self, entity: str, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self._request("POST", entity, json=payload)
        data = response.json() if response.content else {}
        return data if isinstance(data, dict) else {}
