"""
Tests for loading the primary location and default contract of a company.
"""

from unittest.mock import AsyncMock

import pytest

from core.errors import PsaApiError
from core.services.account_context import load_account_context, pick_location


def location(location_id: int, *, active: bool = True, primary: bool = False) -> dict:
    return {"id": location_id, "isActive": active, "isPrimary": primary}


class TestPickLocation:
    def test_prefers_primary(self):
        picked = pick_location([location(1), location(2, primary=True), location(3)])

        assert picked.id == 2

    def test_first_active_without_primary(self):
        picked = pick_location([location(1, active=False), location(2), location(3)])

        assert picked.id == 2

    def test_inactive_primary_ignored(self):
        picked = pick_location([location(1, active=False, primary=True), location(2)])

        assert picked.id == 2

    def test_none_active(self):
        assert pick_location([location(1, active=False)]) is None
        assert pick_location([]) is None


class TestLoadAccountContext:
    @pytest.mark.asyncio
    async def test_location_and_contract(self, psa):
        psa.query = AsyncMock(side_effect=[[location(5, primary=True)], [{"id": 77}]])

        context = await load_account_context(psa, 7)

        assert context.primary_location_id == 5
        assert context.default_contract_id == 77

        location_call, contract_call = psa.query.call_args_list
        assert location_call.args == ("CompanyLocations",)
        assert location_call.kwargs["filters"] == [{"op": "eq", "field": "CompanyID", "value": 7}]
        assert contract_call.args == ("Contracts",)
        assert contract_call.kwargs["filters"][0]["op"] == "and"
        assert {"op": "eq", "field": "IsDefaultContract", "value": True} in contract_call.kwargs["filters"][0]["items"]

    @pytest.mark.asyncio
    async def test_absent_location_and_contract(self, psa):
        psa.query = AsyncMock(side_effect=[[], []])

        context = await load_account_context(psa, 7)

        assert context.primary_location_id is None
        assert context.default_contract_id is None

    @pytest.mark.asyncio
    async def test_location_failure_keeps_contract(self, psa):
        psa.query = AsyncMock(side_effect=[PsaApiError("boom", status_code=500), [{"id": 77}]])

        context = await load_account_context(psa, 7)

        assert context.primary_location_id is None
        assert context.default_contract_id == 77
