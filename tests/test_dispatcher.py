"""
Unit tests for the tool dispatcher.

The Kubecost client is replaced with an AsyncMock so these tests only cover
argument shaping and envelope construction.
"""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from core.kubecost_client import KubecostClient
from core.models import AllocationQuery, AssetQuery, BudgetRule
from tools.dispatcher import ToolDispatcher, ToolEnvelope


@pytest.fixture
def mock_client():
    return AsyncMock(spec=KubecostClient)


@pytest.fixture
def dispatcher(mock_client):
    return ToolDispatcher(mock_client)


class TestToolEnvelope:
    """Test the envelope wire shape."""

    def test_to_dict(self):
        envelope = ToolEnvelope(text="hello")

        assert envelope.to_dict() == {
            "isError": False,
            "content": [{"type": "text", "text": "hello"}],
        }

    def test_error_flag(self):
        assert ToolEnvelope(text="bad", is_error=True).to_dict()["isError"] is True


class TestBudgetTools:
    """Test budget tool dispatch."""

    async def test_list_budgets(self, dispatcher, mock_client, budget_response):
        mock_client.list_budgets.return_value = {"budgets": [budget_response]}

        envelope = await dispatcher.dispatch("list_budgets", {})

        assert envelope.is_error is False
        assert json.loads(envelope.text) == {"budgets": [budget_response]}
        assert envelope.text == json.dumps({"budgets": [budget_response]}, indent=2, ensure_ascii=False)

    async def test_non_ascii_names_kept_verbatim(self, dispatcher, mock_client, budget_response):
        mock_client.get_budget.return_value = {**budget_response, "name": "café-équipe"}

        envelope = await dispatcher.dispatch("get_budget", {"budgetId": "b1"})

        assert '"name": "café-équipe"' in envelope.text
        assert "\\u00e9" not in envelope.text

    async def test_get_budget(self, dispatcher, mock_client, budget_response):
        mock_client.get_budget.return_value = budget_response

        envelope = await dispatcher.dispatch("get_budget", {"budgetId": "b1"})

        mock_client.get_budget.assert_awaited_once_with("b1")
        assert json.loads(envelope.text)["id"] == "b1"

    async def test_create_budget(self, dispatcher, mock_client, budget_args, budget_response):
        mock_client.create_or_update_budget.return_value = budget_response

        envelope = await dispatcher.dispatch("create_budget", budget_args)

        assert envelope.is_error is False
        assert envelope.text.startswith("Budget created successfully: ")
        rule = mock_client.create_or_update_budget.await_args.args[0]
        assert isinstance(rule, BudgetRule)
        assert rule.id is None
        assert rule.to_wire()["kind"] == "soft"
        assert rule.to_wire()["interval"] == "monthly"

    @pytest.mark.parametrize("kind", ["soft", "hard"])
    @pytest.mark.parametrize("interval", ["weekly", "monthly"])
    async def test_enum_values_forwarded_exactly(self, dispatcher, mock_client, budget_args, kind, interval):
        mock_client.create_or_update_budget.return_value = {}

        await dispatcher.dispatch("create_budget", {**budget_args, "kind": kind, "interval": interval})

        body = mock_client.create_or_update_budget.await_args.args[0].to_wire()
        assert (body["kind"], body["interval"]) == (kind, interval)

    async def test_invalid_kind_never_reaches_client(self, dispatcher, mock_client, budget_args):
        envelope = await dispatcher.dispatch("create_budget", {**budget_args, "kind": "medium"})

        assert envelope.is_error is True
        assert "kind" in envelope.text
        mock_client.create_or_update_budget.assert_not_awaited()

    async def test_string_spend_limit_never_reaches_client(self, dispatcher, mock_client, budget_args):
        envelope = await dispatcher.dispatch("create_budget", {**budget_args, "spendLimit": "500", "intervalDay": "3"})

        assert envelope.is_error is True
        assert "spendLimit" in envelope.text
        mock_client.create_or_update_budget.assert_not_awaited()

    async def test_update_budget_moves_budget_id_to_id(self, dispatcher, mock_client, budget_args, budget_response):
        mock_client.create_or_update_budget.return_value = budget_response

        envelope = await dispatcher.dispatch("update_budget", {**budget_args, "budgetId": "b1", "name": "n"})

        assert envelope.text.startswith("Budget updated successfully: ")
        rule = mock_client.create_or_update_budget.await_args.args[0]
        body = rule.to_wire()
        assert body["id"] == "b1"
        assert body["name"] == "n"
        assert "budgetId" not in body
        assert "budget_id" not in rule.model_dump()

    async def test_delete_budget(self, dispatcher, mock_client):
        mock_client.delete_budget.return_value = None

        envelope = await dispatcher.dispatch("delete_budget", {"budgetId": "b-42"})

        assert envelope.is_error is False
        assert envelope.text == "Budget with ID b-42 deleted successfully"
        mock_client.delete_budget.assert_awaited_once_with("b-42")


class TestReportTools:
    """Test allocation, assets and health dispatch."""

    async def test_allocation_with_window_only(self, dispatcher, mock_client):
        mock_client.get_cost_allocation.return_value = {"data": []}

        await dispatcher.dispatch("get_cost_allocation", {"window": "7d"})

        query = mock_client.get_cost_allocation.await_args.args[0]
        assert isinstance(query, AllocationQuery)
        assert query.to_params() == {"window": "7d"}

    async def test_assets(self, dispatcher, mock_client):
        mock_client.get_assets.return_value = {"data": [{"name": "node-1"}]}

        envelope = await dispatcher.dispatch("get_assets", {"window": "7d", "filters": {"cluster": "prod"}})

        query = mock_client.get_assets.await_args.args[0]
        assert isinstance(query, AssetQuery)
        assert query.filters == {"cluster": "prod"}
        assert json.loads(envelope.text)["data"][0]["name"] == "node-1"

    async def test_health_check_healthy(self, dispatcher, mock_client):
        mock_client.health_check.return_value = True

        envelope = await dispatcher.dispatch("health_check")

        assert envelope == ToolEnvelope(text="Kubecost API is healthy and accessible")

    async def test_health_check_unhealthy_is_not_an_error(self, dispatcher, mock_client):
        mock_client.health_check.return_value = False

        envelope = await dispatcher.dispatch("health_check", {})

        assert envelope.is_error is False
        assert envelope.text == "Kubecost API is not accessible"


class TestErrors:
    """Test that every failure comes back as an error envelope."""

    async def test_unknown_tool(self, dispatcher):
        envelope = await dispatcher.dispatch("drop_database", {})

        assert envelope.is_error is True
        assert envelope.text == "Unknown tool: drop_database"

    async def test_http_error(self, dispatcher, mock_client):
        request = httpx.Request("GET", "http://kc/model/budget/b1")
        response = httpx.Response(404, request=request)
        mock_client.get_budget.side_effect = httpx.HTTPStatusError(
            "Client error '404 Not Found'", request=request, response=response
        )

        envelope = await dispatcher.dispatch("get_budget", {"budgetId": "b1"})

        assert envelope.is_error is True
        assert "404 Not Found" in envelope.text

    async def test_timeout(self, dispatcher, mock_client):
        mock_client.list_budgets.side_effect = httpx.ReadTimeout("timed out")

        envelope = await dispatcher.dispatch("list_budgets")

        assert envelope == ToolEnvelope(text="timed out", is_error=True)

    async def test_missing_required_argument(self, dispatcher, mock_client):
        envelope = await dispatcher.dispatch("get_budget", {})

        assert envelope.is_error is True
        assert "budgetId" in envelope.text
        mock_client.get_budget.assert_not_awaited()
