"""Envío del email de respaldo por API transaccional (un solo POST)."""

from __future__ import annotations

import httpx

from adapters.http_client import build_async_client, describe_error_response
from core.config import AppSettings
from core.domain.models import EmailMessage
from core.errors import EmailDeliveryError


class EmailApiSender:
    def __init__(
        self,
        settings: AppSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._transport = transport

    async def send(self, message: EmailMessage) -> None:
        endpoint = self._settings.email_api_endpoint
        if not endpoint:
            raise EmailDeliveryError("EMAIL_API_ENDPOINT is not configured.")

        headers = {
            "Content-Type": "application/json",
            "x-api-key": self._settings.email_api_key or "",
        }
        try:
            async with build_async_client(
                self._settings,
                extra_headers=headers,
                transport=self._transport,
            ) as client:
                response = await client.post(endpoint, json=message.to_payload())
        except httpx.HTTPError as exc:
            raise EmailDeliveryError(str(exc)) from exc

        if not response.is_success:
            raise EmailDeliveryError(describe_error_response(response))
