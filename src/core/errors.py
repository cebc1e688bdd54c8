"""Errores del bridge.

Los adaptadores (HTTP, DNS/TLS) lanzan estas excepciones; los servicios del
Core las capturan y degradan el flujo. Ningún adaptador se recupera solo.
"""

from __future__ import annotations


class BridgeError(Exception):
    """Base de todos los errores propios del bridge."""


class UnsupportedAlertTypeError(BridgeError):
    def __init__(self, test_type: str | None) -> None:
        self.test_type = test_type
        super().__init__(f"Test Type '{test_type}' is not supported. Exiting...")


class PsaApiError(BridgeError):
    """Respuesta no exitosa (o fallo de transporte) de la API del PSA."""

    def __init__(self, detail: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(detail)

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401 or self.detail.startswith("401")


class DocumentationApiError(BridgeError):
    def __init__(self, detail: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(detail)


class TicketCreationError(BridgeError):
    pass


class EmailDeliveryError(BridgeError):
    pass


class HostLookupError(BridgeError):
    """Fallo de resolución DNS o del handshake TLS."""
