"""Ticket assembly and submission, with the email fallback."""

from __future__ import annotations

import logging

from core.config import AppSettings
from core.domain.models import (
    AccountContext,
    AlertOutcome,
    BillingEntity,
    DispatchResult,
    EmailMessage,
    EnrichmentResult,
    TicketDraft,
)
from core.errors import TicketCreationError
from core.interfaces.collaborators import EmailSender, PsaClient

logger = logging.getLogger(__name__)


def build_ticket_draft(
    settings: AppSettings,
    entity: BillingEntity,
    context: AccountContext,
    enrichment: EnrichmentResult,
) -> TicketDraft:
    location_id = context.primary_location_id
    if location_id is None:
        location_id = settings.ticket_fallback_location_id

    return TicketDraft(
        company_id=entity.id,
        location_id=location_id,
        contract_id=context.default_contract_id,
        priority=settings.ticket_priority,
        status=settings.ticket_status,
        queue_id=settings.ticket_queue_id,
        issue_type=settings.ticket_issue_type,
        sub_issue_type=settings.ticket_sub_issue_type,
        sla_id=settings.ticket_sla_id,
        title=enrichment.title,
        description=enrichment.description,
        due_date=enrichment.expires_on,
    )


def build_fallback_email(settings: AppSettings, draft: TicketDraft) -> EmailMessage:
    return EmailMessage.from_plaintext(
        sender=settings.email_from,
        recipients=[settings.email_to],
        subject=draft.title,
        body=draft.description,
    )


async def create_ticket(psa: PsaClient, draft: TicketDraft) -> int:
    """Single create call; a missing item id counts as a failure."""

    result = await psa.create("Tickets", draft.to_payload())
    ticket_id = result.get("itemId") if isinstance(result, dict) else None
    if not ticket_id:
        raise TicketCreationError("No ticket ID")
    return int(ticket_id)


async def dispatch_ticket(
    psa: PsaClient,
    mailer: EmailSender,
    settings: AppSettings,
    draft: TicketDraft,
) -> DispatchResult:
    """Create the ticket or send one fallback email. Never raises."""

    try:
        ticket_id = await create_ticket(psa, draft)
    except Exception as exc:
        logger.error("Ticket creation failed: %s", exc)
    else:
        logger.info("New ticket created: %s", ticket_id)
        return DispatchResult(ticket_id=ticket_id, outcome=AlertOutcome.TICKET_CREATED)

    message = build_fallback_email(settings, draft)
    try:
        await mailer.send(message)
    except Exception:
        logger.exception("Ticket creation failed. Sending an email as a backup also failed.")
        return DispatchResult(ticket_id=None, outcome=AlertOutcome.FALLBACK_FAILED)

    logger.warning("Ticket creation failed. Backup email sent to support.")
    return DispatchResult(ticket_id=None, outcome=AlertOutcome.EMAIL_FALLBACK_SENT, email_sent=True)
