# =============================================================================
# tools/dispatcher.py  —  Tool name + arguments → Kubecost call → envelope
# =============================================================================
#
# HOW IT WORKS (the flow):
#   1. Look up the tool's contract in the registry (unknown name → error)
#   2. Validate the raw arguments against the contract's input model
#   3. Call the matching KubecostClient coroutine
#   4. Wrap the JSON result in a ToolEnvelope
#
#   Every failure along the way (unknown tool, invalid arguments, HTTP
#   error, timeout) lands in the SAME except branch and comes back as an
#   error envelope.  dispatch() never raises.
# =============================================================================

import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Optional

from core.kubecost_client import KubecostClient
from core.models import BudgetRule
from tools.registry import get_tool_spec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolEnvelope:
    """Uniform result of every tool call."""

    text: str
    is_error: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "isError": self.is_error,
            "content": [{"type": "text", "text": self.text}],
        }


def _pretty(result: Any) -> str:
    return json.dumps(result, indent=2, ensure_ascii=False)


class ToolDispatcher:
    """Routes validated tool calls to a KubecostClient."""

    def __init__(self, client: KubecostClient):
        self.client = client
        self._handlers: dict[str, Callable[[Any], Awaitable[str]]] = {
            "list_budgets": self._list_budgets,
            "get_budget": self._get_budget,
            "create_budget": self._create_budget,
            "update_budget": self._update_budget,
            "delete_budget": self._delete_budget,
            "get_cost_allocation": self._get_cost_allocation,
            "get_assets": self._get_assets,
            "health_check": self._health_check,
        }

    async def dispatch(
        self, name: str, arguments: Optional[dict[str, Any]] = None
    ) -> ToolEnvelope:
        try:
            spec = get_tool_spec(name)
            args = spec.parse_arguments(arguments)
            text = await self._handlers[name](args)
        except Exception as e:
            logger.warning(f"{name} failed: {e}")
            return ToolEnvelope(text=str(e) or type(e).__name__, is_error=True)
        return ToolEnvelope(text=text)

    # -------------------------------------------------------------------------
    # Budgets
    # -------------------------------------------------------------------------
    async def _list_budgets(self, args) -> str:
        return _pretty(await self.client.list_budgets())

    async def _get_budget(self, args) -> str:
        return _pretty(await self.client.get_budget(args.budget_id))

    async def _create_budget(self, args) -> str:
        rule = BudgetRule.model_validate(args.model_dump())
        budget = await self.client.create_or_update_budget(rule)
        return f"Budget created successfully: {_pretty(budget)}"

    async def _update_budget(self, args) -> str:
        # budgetId travels to Kubecost as the rule's own `id`.
        fields = args.model_dump(exclude={"budget_id"})
        rule = BudgetRule.model_validate({**fields, "id": args.budget_id})
        budget = await self.client.create_or_update_budget(rule)
        return f"Budget updated successfully: {_pretty(budget)}"

    async def _delete_budget(self, args) -> str:
        await self.client.delete_budget(args.budget_id)
        return f"Budget with ID {args.budget_id} deleted successfully"

    # -------------------------------------------------------------------------
    # Reports & health
    # -------------------------------------------------------------------------
    async def _get_cost_allocation(self, args) -> str:
        return _pretty(await self.client.get_cost_allocation(args))

    async def _get_assets(self, args) -> str:
        return _pretty(await self.client.get_assets(args))

    async def _health_check(self, args) -> str:
        if await self.client.health_check():
            return "Kubecost API is healthy and accessible"
        return "Kubecost API is not accessible"
