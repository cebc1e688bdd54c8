"""Primary location and default contract of a resolved company."""

from __future__ import annotations

import logging
from typing import Any, Iterable

import httpx
from pydantic import ValidationError

from core.domain.models import AccountContext, CompanyLocation
from core.errors import PsaApiError
from core.interfaces.collaborators import PsaClient

logger = logging.getLogger(__name__)


def pick_location(rows: Iterable[dict[str, Any]]) -> CompanyLocation | None:
    """Primary active location, else the first active one, else nothing."""

    locations: list[CompanyLocation] = []
    for row in rows:
        try:
            locations.append(CompanyLocation.model_validate(row))
        except ValidationError:
            logger.warning("Skipping malformed location row: %r", row)

    active = [location for location in locations if location.is_active]
    if not active:
        return None
    for location in active:
        if location.is_primary:
            return location
    return active[0]


async def _load_location_id(psa: PsaClient, company_id: int) -> int | None:
    rows = await psa.query(
        "CompanyLocations",
        filters=[{"op": "eq", "field": "CompanyID", "value": company_id}],
        include_fields=["id", "isActive", "isPrimary"],
    )
    location = pick_location(rows)
    return location.id if location else None


async def _load_default_contract_id(psa: PsaClient, company_id: int) -> int | None:
    rows = await psa.query(
        "Contracts",
        filters=[
            {
                "op": "and",
                "items": [
                    {"op": "eq", "field": "CompanyID", "value": company_id},
                    {"op": "eq", "field": "IsDefaultContract", "value": True},
                ],
            }
        ],
        include_fields=["id"],
    )
    for row in rows:
        if row.get("id") is not None:
            return int(row["id"])
    return None


async def load_account_context(psa: PsaClient, company_id: int) -> AccountContext:
    """Neither a missing location nor a missing contract is an error."""

    location_id: int | None = None
    contract_id: int | None = None

    try:
        location_id = await _load_location_id(psa, company_id)
    except (PsaApiError, httpx.HTTPError, ValueError) as exc:
        logger.error("Location lookup failed for company %s: %s", company_id, exc)

    try:
        contract_id = await _load_default_contract_id(psa, company_id)
    except (PsaApiError, httpx.HTTPError, ValueError) as exc:
        logger.error("Default contract lookup failed for company %s: %s", company_id, exc)

    if location_id is None:
        logger.warning("Company %s has no active location.", company_id)
    if contract_id is None:
        logger.info("Company %s has no default contract.", company_id)

    return AccountContext(primary_location_id=location_id, default_contract_id=contract_id)
