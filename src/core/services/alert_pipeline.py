"""Expiry alert orchestration.

Single entry point shared by the HTTP trigger and the CLI: validate the
alert, prove PSA connectivity, resolve the company, load its account context,
enrich the alert and dispatch the ticket (or the fallback email). Every step
runs sequentially because each depends on the previous one; adapters are
passed in through `Collaborators` so the flow stays free of I/O details.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx

from core.config import AppSettings
from core.domain.models import (
    AccountContext,
    AlertOutcome,
    BillingEntity,
    DocumentationOrganization,
    ExpiryAlert,
    PipelineResult,
)
from core.errors import DocumentationApiError, UnsupportedAlertTypeError
from core.interfaces.collaborators import DocumentationClient, EmailSender, HostInspector, PsaClient
from core.services.account_context import load_account_context
from core.services.connectivity import probe_psa
from core.services.dispatcher import build_ticket_draft, dispatch_ticket
from core.services.enrichers import build_enricher
from core.services.organization_resolver import resolve_billing_entity

logger = logging.getLogger(__name__)


@dataclass
class Collaborators:
    """External systems the pipeline talks to."""

    psa: PsaClient
    documentation: DocumentationClient
    mailer: EmailSender
    inspector: HostInspector


async def find_documentation_organization(
    documentation: DocumentationClient,
    organization_name: str,
) -> DocumentationOrganization | None:
    try:
        organization = await documentation.find_organization(organization_name)
    except (DocumentationApiError, httpx.HTTPError, ValueError) as exc:
        logger.error("IT Glue organization lookup failed for '%s': %s", organization_name, exc)
        return None
    if organization is None:
        logger.warning("Organization '%s' not found in IT Glue.", organization_name)
    return organization


async def process_alert(
    *,
    settings: AppSettings,
    alert: ExpiryAlert,
    collaborators: Collaborators,
) -> PipelineResult:
    psa_usable = True
    if settings.verify_psa_connectivity:
        psa_usable = await probe_psa(collaborators.psa)

    organization = await find_documentation_organization(collaborators.documentation, alert.organization_name)

    entity = BillingEntity.sentinel()
    context = AccountContext()
    if psa_usable:
        entity = await resolve_billing_entity(
            collaborators.psa,
            alert.organization_name,
            short_name_hint=organization.short_name if organization else None,
        )
        if not entity.is_sentinel:
            context = await load_account_context(collaborators.psa, entity.id)

    enricher = build_enricher(
        alert.kind,
        documentation=collaborators.documentation,
        inspector=collaborators.inspector,
        settings=settings,
    )
    enrichment = await enricher.enrich(alert, organization=organization, entity=entity)

    if enrichment.suppression is not None:
        return PipelineResult(
            status_code=enrichment.suppression.status_code,
            body=enrichment.suppression.message,
            outcome=enrichment.suppression.outcome,
            entity_id=entity.id,
        )

    draft = build_ticket_draft(settings, entity, context, enrichment)
    dispatch = await dispatch_ticket(collaborators.psa, collaborators.mailer, settings, draft)

    return PipelineResult(
        status_code=200,
        body=alert.acknowledgment(),
        outcome=dispatch.outcome,
        ticket_id=dispatch.ticket_id,
        entity_id=entity.id,
    )


async def handle_request(
    params: Mapping[str, Any],
    *,
    settings: AppSettings,
    collaborators: Collaborators,
) -> PipelineResult:
    """Validate raw trigger parameters, then run the pipeline."""

    logger.info(
        "Test Type: %s, Org: %s, Resource: %s, Time To Expiry: %s, URL: %s",
        params.get("testType"),
        params.get("organizationName"),
        params.get("resourceName"),
        params.get("resourceTimeToExpiry"),
        params.get("resourceUrl"),
    )

    try:
        alert = ExpiryAlert.from_params(params)
    except UnsupportedAlertTypeError as exc:
        logger.warning(str(exc))
        return PipelineResult(status_code=400, body=str(exc), outcome=AlertOutcome.REJECTED)

    return await process_alert(settings=settings, alert=alert, collaborators=collaborators)
