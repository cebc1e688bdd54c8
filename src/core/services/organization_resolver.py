"""Organization name → PSA billing entity.

The documentation platform only gives us a free-text organization name, so
the match against the PSA is heuristic:

1. substring search on the company name;
2. if nothing matched, exact match of the documentation short name against
   the company number or the "Client Abbreviation" UDF;
3. inactive companies are dropped;
4. several candidates are narrowed to those whose name is contained in the
   input name;
5. anything but exactly one candidate resolves to the sentinel (id 0).
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

import httpx
from pydantic import ValidationError

from core.domain.models import BillingEntity
from core.errors import PsaApiError
from core.interfaces.collaborators import PsaClient

logger = logging.getLogger(__name__)

COMPANY_FIELDS = ["id", "companyName", "companyNumber", "isActive"]
CLIENT_ABBREVIATION_UDF = "Client Abbreviation"


def name_contains_filter(name: str) -> list[dict[str, Any]]:
    return [{"op": "contains", "field": "CompanyName", "value": name}]


def short_name_filter(short_name: str) -> list[dict[str, Any]]:
    return [
        {
            "op": "or",
            "items": [
                {"op": "eq", "field": "CompanyNumber", "value": short_name},
                {"op": "eq", "field": CLIENT_ABBREVIATION_UDF, "value": short_name, "udf": True},
            ],
        }
    ]


def _parse_entities(rows: Iterable[dict[str, Any]]) -> list[BillingEntity]:
    entities: list[BillingEntity] = []
    for row in rows:
        try:
            entities.append(BillingEntity.model_validate(row))
        except ValidationError:
            logger.warning("Skipping malformed company row: %r", row)
    return entities


def select_billing_entity(organization_name: str, candidates: Iterable[BillingEntity]) -> BillingEntity:
    """Apply the active / reverse-containment / uniqueness rules."""

    active = [entity for entity in candidates if entity.is_active]

    if len(active) > 1:
        needle = organization_name.lower()
        active = [entity for entity in active if entity.name and entity.name.lower() in needle]
        if len(active) > 1:
            logger.warning(
                "Organization '%s' matches %d active companies; not picking one.",
                organization_name,
                len(active),
            )
            active = []

    if len(active) != 1:
        return BillingEntity.sentinel()
    return active[0]


async def find_candidates(
    psa: PsaClient,
    organization_name: str,
    *,
    short_name_hint: str | None = None,
) -> list[BillingEntity]:
    rows: list[dict[str, Any]] = []
    if organization_name.strip():
        rows = await psa.query(
            "Companies",
            filters=name_contains_filter(organization_name),
            include_fields=COMPANY_FIELDS,
        )

    if not rows and short_name_hint:
        logger.info("No company name match for '%s'; trying short name '%s'.", organization_name, short_name_hint)
        rows = await psa.query(
            "Companies",
            filters=short_name_filter(short_name_hint),
            include_fields=COMPANY_FIELDS,
        )

    return _parse_entities(rows)


async def resolve_billing_entity(
    psa: PsaClient,
    organization_name: str,
    *,
    short_name_hint: str | None = None,
) -> BillingEntity:
    """Resolve to exactly one entity: a genuine match or the sentinel."""

    try:
        candidates = await find_candidates(psa, organization_name, short_name_hint=short_name_hint)
    except (PsaApiError, httpx.HTTPError, ValueError) as exc:
        logger.error("Company lookup failed for '%s': %s", organization_name, exc)
        return BillingEntity.sentinel()

    entity = select_billing_entity(organization_name, candidates)
    if entity.is_sentinel:
        logger.warning("No unique company found for '%s'; using company 0.", organization_name)
    else:
        logger.info("Matched '%s' to company %s (%s).", organization_name, entity.id, entity.name)
    return entity
