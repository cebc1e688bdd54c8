"""
Tests for the organization name → billing entity resolution.
"""

from unittest.mock import AsyncMock

import pytest

from core.domain.models import BillingEntity
from core.errors import PsaApiError
from core.services.organization_resolver import (
    CLIENT_ABBREVIATION_UDF,
    resolve_billing_entity,
    select_billing_entity,
)


def company(company_id: int, name: str, *, active: bool = True, number: str = "") -> dict:
    return {"id": company_id, "companyName": name, "companyNumber": number, "isActive": active}


def entity(company_id: int, name: str, *, active: bool = True) -> BillingEntity:
    return BillingEntity.model_validate(company(company_id, name, active=active))


class TestSelectBillingEntity:
    def test_single_active_match(self):
        result = select_billing_entity("Acme Corp", [entity(7, "Acme Corporation")])

        assert result.id == 7

    def test_inactive_dropped(self):
        result = select_billing_entity(
            "Acme Corp",
            [entity(7, "Acme Corporation", active=False), entity(8, "Acme Corp Ltd")],
        )

        assert result.id == 8

    def test_reverse_containment_narrows(self):
        result = select_billing_entity(
            "Acme Corp - Vancouver",
            [entity(7, "Acme Corp"), entity(8, "Acme Corporation Holdings")],
        )

        assert result.id == 7

    def test_reverse_containment_is_case_insensitive(self):
        result = select_billing_entity("ACME CORP", [entity(7, "acme corp"), entity(8, "Acme Corp West")])

        assert result.id == 7

    def test_ambiguous_after_narrowing_is_sentinel(self):
        result = select_billing_entity("Acme Corp", [entity(7, "Acme"), entity(8, "Acme Corp")])

        assert result.is_sentinel

    def test_narrowing_to_nothing_is_sentinel(self):
        result = select_billing_entity("Acme", [entity(7, "Acme One"), entity(8, "Acme Two")])

        assert result.is_sentinel

    def test_no_candidates_is_sentinel(self):
        assert select_billing_entity("Acme", []).is_sentinel


class TestResolveBillingEntity:
    @pytest.mark.asyncio
    async def test_contains_query(self, psa):
        psa.query = AsyncMock(return_value=[company(7, "Acme Corporation")])

        result = await resolve_billing_entity(psa, "Acme Corp")

        assert result.id == 7
        psa.query.assert_awaited_once()
        args, kwargs = psa.query.call_args
        assert args == ("Companies",)
        assert kwargs["filters"] == [{"op": "contains", "field": "CompanyName", "value": "Acme Corp"}]
        assert kwargs["include_fields"] == ["id", "companyName", "companyNumber", "isActive"]

    @pytest.mark.asyncio
    async def test_short_name_fallback(self, psa):
        psa.query = AsyncMock(side_effect=[[], [company(11, "A.C.M.E. Inc", number="ACME")]])

        result = await resolve_billing_entity(psa, "Acme Corp", short_name_hint="ACME")

        assert result.id == 11
        assert psa.query.await_count == 2
        or_filter = psa.query.call_args_list[1].kwargs["filters"][0]
        assert or_filter["op"] == "or"
        assert {"op": "eq", "field": "CompanyNumber", "value": "ACME"} in or_filter["items"]
        assert {"op": "eq", "field": CLIENT_ABBREVIATION_UDF, "value": "ACME", "udf": True} in or_filter["items"]

    @pytest.mark.asyncio
    async def test_no_short_name_query_without_hint(self, psa):
        psa.query = AsyncMock(return_value=[])

        result = await resolve_billing_entity(psa, "Acme Corp")

        assert result.is_sentinel
        psa.query.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_no_short_name_query_when_name_matched(self, psa):
        psa.query = AsyncMock(return_value=[company(7, "Acme Corporation", active=False)])

        result = await resolve_billing_entity(psa, "Acme Corp", short_name_hint="ACME")

        assert result.is_sentinel
        psa.query.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_blank_name_skips_contains_query(self, psa):
        psa.query = AsyncMock(return_value=[company(3, "Whatever")])

        result = await resolve_billing_entity(psa, "  ", short_name_hint="WHT")

        assert result.id == 3
        assert psa.query.call_args.kwargs["filters"][0]["op"] == "or"

    @pytest.mark.asyncio
    async def test_psa_failure_degrades_to_sentinel(self, psa):
        psa.query = AsyncMock(side_effect=PsaApiError("500 - Internal Server Error", status_code=500))

        result = await resolve_billing_entity(psa, "Acme Corp")

        assert result.is_sentinel
