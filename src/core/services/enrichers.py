"""Type-specific alert enrichment.

Each enricher looks up the expiring resource in the documentation platform,
applies its suppression rule and returns an `EnrichmentResult` by value. The
pipeline never shares state between the two variants.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx

from core.config import AppSettings
from core.domain.models import (
    AlertKind,
    AlertOutcome,
    BillingEntity,
    DocumentationOrganization,
    DomainRecord,
    EnrichmentResult,
    ExpiryAlert,
    SslCertificateRecord,
    Suppression,
    TlsInspectionResult,
    format_long_date,
)
from core.errors import DocumentationApiError, HostLookupError
from core.interfaces.collaborators import DocumentationClient, HostInspector

logger = logging.getLogger(__name__)

DETAILS_HEADER = "Additional Details \n-----------------------\n"


class AlertEnricher(Protocol):
    async def enrich(
        self,
        alert: ExpiryAlert,
        *,
        organization: DocumentationOrganization | None,
        entity: BillingEntity,
    ) -> EnrichmentResult:
        ...


def _description_preamble(alert: ExpiryAlert, entity: BillingEntity) -> str:
    text = "Alert from IT Glue.\n"
    if entity.is_sentinel:
        text += f"Organization: {alert.organization_name}\n"
    return text


class DomainExpiryEnricher:
    """Domain variant: registrar/notes from the documented domain record."""

    def __init__(self, documentation: DocumentationClient, settings: AppSettings) -> None:
        self._documentation = documentation
        self._settings = settings

    async def find_record(
        self,
        organization: DocumentationOrganization | None,
        resource_name: str,
    ) -> DomainRecord | None:
        if organization is None:
            logger.warning("Organization unknown to IT Glue; skipping domain lookup for '%s'.", resource_name)
            return None
        try:
            records = await self._documentation.list_domains(organization.id)
        except (DocumentationApiError, httpx.HTTPError, ValueError) as exc:
            logger.error("Domain lookup failed for organization %s: %s", organization.id, exc)
            return None
        for record in records:
            if record.name == resource_name:
                return record
        logger.warning("Domain '%s' not found in IT Glue.", resource_name)
        return None

    def describe(self, alert: ExpiryAlert, entity: BillingEntity, record: DomainRecord | None) -> str:
        details = ""
        if record is not None:
            details = DETAILS_HEADER
            details += f"Registrar Name: {record.registrar_name} \n"
            if record.notes:
                details += f"Notes: {record.notes} \n"
            if record.expires_on:
                details += f"Expires On: {format_long_date(record.expires_on)} \n"
            details += f"ITG Url: {alert.resource_url}"

        return (
            _description_preamble(alert, entity)
            + f"The domain '{alert.resource_name}' is expiring in {alert.time_to_expiry}. \n\n\n{details}"
        )

    async def enrich(
        self,
        alert: ExpiryAlert,
        *,
        organization: DocumentationOrganization | None,
        entity: BillingEntity,
    ) -> EnrichmentResult:
        record = await self.find_record(organization, alert.resource_name)
        title = f"Domain Expiring: {alert.resource_name}"

        # Not found: nothing to check the marker against.
        if record is not None and record.notes and self._settings.ignore_alerts_marker in record.notes:
            message = f"The expiring domain '{alert.resource_name}' was ignored. Exiting..."
            logger.warning(message)
            return EnrichmentResult(
                title=title,
                description="",
                suppression=Suppression(
                    outcome=AlertOutcome.IGNORED_MARKER,
                    status_code=200,
                    message=message,
                ),
            )

        return EnrichmentResult(
            title=title,
            description=self.describe(alert, entity, record),
            expires_on=record.expires_on if record else None,
        )


class SslExpiryEnricher:
    """SSL variant: expiry from the expirations feed, IP and issuer live."""

    def __init__(
        self,
        documentation: DocumentationClient,
        inspector: HostInspector,
        settings: AppSettings,
    ) -> None:
        self._documentation = documentation
        self._inspector = inspector
        self._settings = settings

    async def find_record(
        self,
        organization: DocumentationOrganization | None,
        resource_name: str,
    ) -> SslCertificateRecord | None:
        if organization is None:
            logger.warning("Organization unknown to IT Glue; skipping expiration lookup for '%s'.", resource_name)
            return None
        try:
            records = await self._documentation.list_ssl_expirations(organization.id)
        except (DocumentationApiError, httpx.HTTPError, ValueError) as exc:
            logger.error("Expiration lookup failed for organization %s: %s", organization.id, exc)
            return None
        for record in records:
            if record.resource_name == resource_name:
                return record
        logger.warning("SSL certificate '%s' not found in IT Glue expirations.", resource_name)
        return None

    async def inspect(self, resource_name: str) -> TlsInspectionResult:
        """Best-effort DNS + TLS lookups; wildcard names are never inspected."""

        if not resource_name or resource_name.startswith("*"):
            return TlsInspectionResult()

        ip_address: str | None = None
        issuer: str | None = None

        logger.info("Attempting to lookup ip from the domain: %s", resource_name)
        try:
            ip_address = await self._inspector.resolve_ip(resource_name)
        except HostLookupError:
            logger.warning("%s is not a valid domain. IP lookup failed.", resource_name)

        logger.info("Attempting to lookup SSL Issuer from the domain: %s", resource_name)
        try:
            issuer = await self._inspector.lookup_issuer(resource_name)
        except HostLookupError:
            logger.warning("SSL Issuer lookup failed for: %s", resource_name)

        return TlsInspectionResult(ip_address=ip_address, issuer_organization=issuer)

    def describe(
        self,
        alert: ExpiryAlert,
        entity: BillingEntity,
        record: SslCertificateRecord | None,
        inspection: TlsInspectionResult,
    ) -> str:
        details = ""
        if record is not None and record.expires_on:
            details = DETAILS_HEADER
            if inspection.ip_address:
                details += f"Host IP Address: {inspection.ip_address} \n"
            if inspection.issuer_organization:
                details += f"Issuer: {inspection.issuer_organization} \n"
            details += f"Expires On: {format_long_date(record.expires_on)} \n"
            details += f"ITG Url: {alert.resource_url}"

        return (
            _description_preamble(alert, entity)
            + f"The ssl cert '{alert.resource_name}' is expiring in {alert.time_to_expiry}. \n\n\n{details}"
        )

    async def enrich(
        self,
        alert: ExpiryAlert,
        *,
        organization: DocumentationOrganization | None,
        entity: BillingEntity,
    ) -> EnrichmentResult:
        record = await self.find_record(organization, alert.resource_name)
        inspection = await self.inspect(alert.resource_name)
        title = f"SSL Cert Expiring: {alert.resource_name}"

        free_ca = self._settings.ignored_certificate_issuer
        if inspection.issuer_organization == free_ca:
            message = f"SSL Cert '{alert.resource_name}' is registered with {free_ca}. Exiting..."
            logger.warning(message)
            return EnrichmentResult(
                title=title,
                description="",
                suppression=Suppression(
                    outcome=AlertOutcome.IGNORED_FREE_CA,
                    status_code=400,
                    message=message,
                ),
            )

        return EnrichmentResult(
            title=title,
            description=self.describe(alert, entity, record, inspection),
            expires_on=record.expires_on if record else None,
        )


def build_enricher(
    kind: AlertKind,
    *,
    documentation: DocumentationClient,
    inspector: HostInspector,
    settings: AppSettings,
) -> AlertEnricher:
    if kind is AlertKind.DOMAIN:
        return DomainExpiryEnricher(documentation, settings)
    return SslExpiryEnricher(documentation, inspector, settings)
