"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Validación estricta de la alerta entrante una sola vez, en el borde.
- Los payloads del PSA y del email se derivan de estos modelos, no de dicts
  sueltos construidos en cada rama.

Nota:
- Estos modelos describen *qué* es la información, no *cómo* se obtiene.
"""

from __future__ import annotations

import html
import re
from collections.abc import Mapping
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from core.errors import UnsupportedAlertTypeError

_NEWLINE_RE = re.compile(r"\r?\n")


def parse_expiry_date(value: Any) -> datetime | None:
    """Normaliza fechas de la documentación a `datetime` UTC.

    Acepta `YYYY-MM-DD` (medianoche UTC) o ISO-8601 completo; devuelve `None`
    si el valor no es interpretable.
    """

    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        try:
            if len(text) == 10:
                d = date.fromisoformat(text)
                parsed = datetime(d.year, d.month, d.day)
            else:
                parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def format_long_date(value: datetime) -> str:
    """Fecha larga estilo en-CA: `Thursday, May 1, 2025`.

    Los meses usan la abreviatura de `%b` sin punto (`Sep`, no `Sept.`).
    """

    return f"{value:%A}, {value:%b} {value.day}, {value.year}"


class AlertKind(str, Enum):
    """Tipos de alerta soportados (valor = `testType` recibido)."""

    DOMAIN = "Domain Expiry"
    SSL_CERTIFICATE = "SSL Expiry"


class AlertOutcome(str, Enum):
    REJECTED = "rejected"
    IGNORED_MARKER = "ignored_marker"
    IGNORED_FREE_CA = "ignored_free_ca"
    TICKET_CREATED = "ticket_created"
    EMAIL_FALLBACK_SENT = "email_fallback_sent"
    FALLBACK_FAILED = "fallback_failed"


class ExpiryAlert(BaseModel):
    """Alerta de expiración recibida desde el sistema de documentación."""

    model_config = ConfigDict(frozen=True)

    kind: AlertKind
    organization_name: str = Field(default="", description="Nombre libre de la organización.")
    resource_name: str = Field(default="", description="Dominio o nombre del certificado.")
    time_to_expiry: str = Field(default="", description="Texto libre, p.ej. '14 days'.")
    resource_url: str = Field(default="", description="URL del recurso en la documentación.")

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ExpiryAlert":
        """Construye la alerta desde los parámetros del trigger HTTP."""

        test_type = params.get("testType")
        try:
            kind = AlertKind(test_type)
        except ValueError:
            raise UnsupportedAlertTypeError(test_type) from None

        def text(key: str) -> str:
            value = params.get(key)
            return "" if value is None else str(value)

        return cls(
            kind=kind,
            organization_name=text("organizationName"),
            resource_name=text("resourceName"),
            time_to_expiry=text("resourceTimeToExpiry"),
            resource_url=text("resourceUrl"),
        )

    def acknowledgment(self) -> str:
        """Cuerpo de respuesta genérico para el llamador."""

        if not self.resource_name:
            return "This HTTP triggered function executed successfully."
        return (
            f"Test: '{self.kind.value}' on '{self.resource_name}' was triggered. Org: {self.organization_name}"
            f" \n Time to Expiry: {self.time_to_expiry}"
            f" \n Url: {self.resource_url}"
        )


class BillingEntity(BaseModel):
    """Compañía del PSA contra la que se abre el ticket."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int
    name: str = Field(default="", alias="companyName")
    number: str = Field(default="", alias="companyNumber")
    is_active: bool = Field(default=False, alias="isActive")

    @field_validator("name", "number", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @classmethod
    def sentinel(cls) -> "BillingEntity":
        return cls(id=0, name="", number="", is_active=True)

    @property
    def is_sentinel(self) -> bool:
        return self.id == 0


class CompanyLocation(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int
    is_active: bool = Field(default=False, alias="isActive")
    is_primary: bool = Field(default=False, alias="isPrimary")


class AccountContext(BaseModel):
    """Ubicación y contrato por defecto; `None` = usar defaults del sistema."""

    primary_location_id: int | None = None
    default_contract_id: int | None = None


class DocumentationOrganization(BaseModel):
    id: str
    name: str = ""
    short_name: str | None = None


class DomainRecord(BaseModel):
    name: str
    expires_on: datetime | None = None
    registrar_name: str | None = None
    notes: str | None = None

    @field_validator("expires_on", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> datetime | None:
        return parse_expiry_date(value)


class SslCertificateRecord(BaseModel):
    resource_name: str
    expires_on: datetime | None = None

    @field_validator("expires_on", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> datetime | None:
        return parse_expiry_date(value)


class TlsInspectionResult(BaseModel):
    ip_address: str | None = None
    issuer_organization: str | None = None


class Suppression(BaseModel):
    """Corte intencional del flujo: no hay ticket ni email."""

    outcome: AlertOutcome
    status_code: int
    message: str


class EnrichmentResult(BaseModel):
    title: str
    description: str
    expires_on: datetime | None = None
    suppression: Suppression | None = None


class TicketDraft(BaseModel):
    """Ticket a crear en el PSA (se construye y envía una sola vez)."""

    company_id: int
    location_id: int
    contract_id: int | None = None
    priority: int
    status: int
    queue_id: int | None = None
    issue_type: int | None = None
    sub_issue_type: int | None = None
    sla_id: int | None = None
    title: str
    description: str
    due_date: datetime | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "CompanyID": self.company_id,
            "CompanyLocationID": self.location_id,
            "Priority": self.priority,
            "Status": self.status,
            "QueueID": self.queue_id,
            "IssueType": self.issue_type,
            "SubIssueType": self.sub_issue_type,
            "ServiceLevelAgreementID": self.sla_id,
            "ContractID": self.contract_id,
            "Title": self.title,
            "Description": self.description,
        }
        if self.due_date is not None:
            due = self.due_date.astimezone(timezone.utc)
            payload["DueDateTime"] = due.strftime("%Y-%m-%dT%H:%M:%SZ")
        return payload


class MailContact(BaseModel):
    """Remitente/destinatario del email de respaldo."""

    email: str | None = Field(default=None, description="Dirección de correo.")
    name: str | None = Field(default=None, description="Nombre visible.")

    def to_payload(self) -> dict[str, str | None]:
        return {"Email": self.email, "Name": self.name}


class EmailMessage(BaseModel):
    sender: MailContact
    recipients: list[MailContact] = Field(default_factory=list)
    subject: str
    html_content: str

    @classmethod
    def from_plaintext(
        cls,
        *,
        sender: MailContact,
        recipients: list[MailContact],
        subject: str,
        body: str,
    ) -> "EmailMessage":
        return cls(
            sender=sender,
            recipients=recipients,
            subject=subject,
            html_content=_NEWLINE_RE.sub("<br />", html.escape(body, quote=False)),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "From": self.sender.to_payload(),
            "To": [recipient.to_payload() for recipient in self.recipients],
            "Subject": self.subject,
            "HTMLContent": self.html_content,
        }


class DispatchResult(BaseModel):
    ticket_id: int | None = None
    outcome: AlertOutcome
    email_sent: bool = False


class PipelineResult(BaseModel):
    """Salida de una invocación: lo que se responde al llamador."""

    status_code: int = 200
    body: str
    outcome: AlertOutcome
    ticket_id: int | None = None
    entity_id: int | None = None
