# =============================================================================
# tools/registry.py  —  Tool contracts (ONE definition per tool)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Declares every tool this server exposes: its name, the description the
#   LLM reads, and a pydantic input model.  From that single input model we
#   derive BOTH:
#     - the JSON Schema sent to MCP clients as `inputSchema`, and
#     - the runtime validation applied before anything hits Kubecost.
#   The two can't drift apart because there is only one source.
#
# TOOL NAMING CONVENTIONS:
#   - list_* / get_*  → read-only retrieval
#   - create_* / update_* / delete_* → mutate budget rules in Kubecost
#   - health_check    → connectivity check, never an error result
# =============================================================================

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, Field

from core.models import AllocationQuery, AssetQuery, BudgetDefinition, KubecostModel


class UnknownToolError(LookupError):
    """Raised when a tool name has no registered contract."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


# -----------------------------------------------------------------------------
# Input models that only exist at the tool boundary
# -----------------------------------------------------------------------------
class NoArguments(KubecostModel):
    """Input for tools that take no arguments."""


class BudgetIdInput(KubecostModel):
    budget_id: str = Field(description="The ID of the budget rule")


class CreateBudgetInput(BudgetDefinition):
    """All budget fields are required on create."""


class UpdateBudgetInput(BudgetDefinition):
    """Full replacement of an existing rule: every budget field is required."""

    budget_id: str = Field(description="The ID of the budget rule to update")


@dataclass(frozen=True)
class ToolSpec:
    """A tool's name, description and input contract."""

    name: str
    description: str
    input_model: type[BaseModel]

    def input_schema(self) -> dict[str, Any]:
        """JSON Schema for the tool's arguments (camelCase property names)."""
        schema = self.input_model.model_json_schema(by_alias=True)
        schema.setdefault("properties", {})
        schema.setdefault("required", [])
        return schema

    def parse_arguments(self, arguments: Optional[dict[str, Any]]) -> BaseModel:
        """Validate raw tool arguments.

        Raises:
            pydantic.ValidationError: On missing fields, wrong types or
                values outside an enum.
        """
        return self.input_model.model_validate(arguments or {})


TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="list_budgets",
        description="List all budget rules in Kubecost",
        input_model=NoArguments,
    ),
    ToolSpec(
        name="get_budget",
        description="Get detailed information about a specific budget rule",
        input_model=BudgetIdInput,
    ),
    ToolSpec(
        name="create_budget",
        description="Create a new budget rule in Kubecost",
        input_model=CreateBudgetInput,
    ),
    ToolSpec(
        name="update_budget",
        description="Update an existing budget rule in Kubecost",
        input_model=UpdateBudgetInput,
    ),
    ToolSpec(
        name="delete_budget",
        description="Delete a budget rule from Kubecost",
        input_model=BudgetIdInput,
    ),
    ToolSpec(
        name="get_cost_allocation",
        description="Get cost allocation data from Kubecost",
        input_model=AllocationQuery,
    ),
    ToolSpec(
        name="get_assets",
        description="Get asset data from Kubecost",
        input_model=AssetQuery,
    ),
    ToolSpec(
        name="health_check",
        description="Check if Kubecost API is healthy and accessible",
        input_model=NoArguments,
    ),
)

_TOOLS_BY_NAME: dict[str, ToolSpec] = {spec.name: spec for spec in TOOLS}


def get_tool_spec(name: str) -> ToolSpec:
    """Look up a tool contract by name.

    Raises:
        UnknownToolError: If no tool with that name is registered.
    """
    try:
        return _TOOLS_BY_NAME[name]
    except KeyError:
        raise UnknownToolError(name) from None


def list_tool_names() -> list[str]:
    return [spec.name for spec in TOOLS]
