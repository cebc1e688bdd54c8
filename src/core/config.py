"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) para API, CLI y adaptadores.
- Los nombres de variables son los de la Function App ya desplegada
  (`AUTOTASK_USER`, `TICKET_QueueID`, `EMAIL_FROM__Email`, ...).
"""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.models import MailContact


class AppSettings(BaseSettings):
    """Configuración central de la aplicación."""

    model_config = SettingsConfigDict(
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        env_ignore_empty=True,
    )

    # PSA (Autotask)
    autotask_user: str | None = Field(default=None, description="Usuario API del PSA.")
    autotask_secret: str | None = Field(default=None, description="Secret del usuario API.")
    autotask_integration_code: str | None = Field(
        default=None,
        description="Tracking identifier / integration code del PSA.",
    )
    psa_zone_lookup_url: str = Field(
        default="https://webservices.autotask.net/atservicesrest/v1.0/zoneInformation",
        min_length=8,
        description="Endpoint que devuelve la zona (URL base) del usuario API.",
    )
    verify_psa_connectivity: bool = Field(
        default=True,
        description="Probar credenciales del PSA antes de cualquier consulta dependiente.",
    )

    # Documentación (IT Glue)
    itg_api_key: str | None = Field(default=None, description="API key de IT Glue.")
    itg_base_url: str = Field(
        default="https://api.itglue.com",
        min_length=8,
        description="Base URL de la API de IT Glue.",
    )
    documentation_page_size: int = Field(
        default=1000,
        ge=1,
        le=1000,
        description="Tamaño de página para dominios/expiraciones.",
    )

    # Ticket defaults
    ticket_queue_id: int | None = Field(
        default=None,
        validation_alias=AliasChoices("ticket_queue_id", "ticket_queueid"),
    )
    ticket_issue_type: int | None = Field(
        default=None,
        validation_alias=AliasChoices("ticket_issue_type", "ticket_issuetype"),
    )
    ticket_sub_issue_type: int | None = Field(
        default=None,
        validation_alias=AliasChoices("ticket_sub_issue_type", "ticket_subissuetype"),
    )
    ticket_sla_id: int | None = Field(
        default=None,
        validation_alias=AliasChoices("ticket_sla_id", "ticket_servicelevelagreementid"),
    )
    ticket_priority: int = Field(default=3, ge=1)
    ticket_status: int = Field(default=1, ge=1)
    ticket_fallback_location_id: int = Field(
        default=10,
        description="Ubicación usada cuando la compañía no tiene ninguna activa.",
    )

    # Email de respaldo
    email_from: MailContact = Field(default_factory=MailContact)
    email_to: MailContact = Field(default_factory=MailContact)
    email_api_endpoint: str | None = Field(default=None, description="Endpoint de la API de email.")
    email_api_key: str | None = Field(default=None, description="API key de la API de email.")

    # Reglas de supresión
    ignored_certificate_issuer: str = Field(
        default="Let's Encrypt",
        min_length=1,
        description="Organización emisora cuyos certificados no generan ticket.",
    )
    ignore_alerts_marker: str = Field(
        default="# Ignore Alerts",
        min_length=1,
        description="Marcador en las notas de un dominio que suprime la alerta.",
    )

    # Red
    http_timeout_seconds: float = Field(default=10.0, gt=0, description="Timeout por request (segundos).")
    tls_timeout_seconds: float = Field(default=10.0, gt=0, description="Timeout de DNS/handshake TLS.")
    user_agent: str = Field(default="itg-expiry-bridge/0.1", min_length=1)

    log_level: str = Field(default="INFO", description="Nivel de logging (DEBUG, INFO, ...).")

    def missing_required(self) -> list[str]:
        """Variables necesarias para operar que no están definidas."""

        required = {
            "AUTOTASK_USER": self.autotask_user,
            "AUTOTASK_SECRET": self.autotask_secret,
            "AUTOTASK_INTEGRATION_CODE": self.autotask_integration_code,
            "ITG_API_KEY": self.itg_api_key,
            "TICKET_QueueID": self.ticket_queue_id,
            "TICKET_IssueType": self.ticket_issue_type,
            "TICKET_SubIssueType": self.ticket_sub_issue_type,
            "TICKET_ServiceLevelAgreementID": self.ticket_sla_id,
            "EMAIL_API_ENDPOINT": self.email_api_endpoint,
            "EMAIL_API_KEY": self.email_api_key,
            "EMAIL_FROM__Email": self.email_from.email,
            "EMAIL_TO__Email": self.email_to.email,
        }
        return [name for name, value in required.items() if value in (None, "")]
