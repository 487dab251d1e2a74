# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These pydantic models define the *shape* of every request body and query
# that flows from a tool call to the Kubecost API.  Each one is the single
# definition of its contract: the JSON Schema advertised to MCP clients and
# the runtime validation of incoming arguments are both derived from it.
#
# WIRE FORMAT:
#   Python attributes are snake_case; Kubecost speaks camelCase.  The
#   alias generator maps one to the other, so `interval_day` travels as
#   `intervalDay`.  Either spelling is accepted on input.
#
# NUMBERS AND BOOLEANS ARE STRICT:
#   "500" is not a spendLimit and "true" is not an accumulate flag, matching
#   the number/integer/boolean types in the advertised JSON Schema.  An int
#   is still a valid float.
#
# RESPONSES ARE NOT MODELLED HERE:
#   Budget, allocation and asset responses are forwarded to the caller as
#   parsed JSON, untouched.  Re-modelling them would drop any field Kubecost
#   adds that we don't know about.
# =============================================================================

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

BudgetKind = Literal["soft", "hard"]
BudgetInterval = Literal["weekly", "monthly"]


class KubecostModel(BaseModel):
    """Base for every model exchanged with Kubecost (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Dump as a camelCase dict with unset optionals left out."""
        return self.model_dump(by_alias=True, exclude_none=True)


# -----------------------------------------------------------------------------
# Budget rules
# -----------------------------------------------------------------------------
class BudgetScope(KubecostModel):
    """Which workloads a budget covers.  Every dimension is optional."""

    cluster: Optional[list[str]] = Field(
        default=None, description="List of cluster names to apply budget to"
    )
    namespace: Optional[list[str]] = Field(
        default=None, description="List of namespace names to apply budget to"
    )
    label: Optional[dict[str, list[str]]] = Field(
        default=None, description="Label filters for budget scope"
    )


class BudgetAction(KubecostModel):
    """A notification fired when spend crosses `percentage` of the limit."""

    percentage: float = Field(
        strict=True, description="Percentage threshold for action"
    )
    emails: Optional[list[str]] = Field(
        default=None, description="Email addresses for notifications"
    )
    slack_webhooks: Optional[list[str]] = Field(
        default=None, description="Slack webhook URLs for notifications"
    )
    ms_teams_webhooks: Optional[list[str]] = Field(
        default=None, description="Microsoft Teams webhook URLs for notifications"
    )


class BudgetDefinition(KubecostModel):
    """Everything a caller supplies to describe a budget rule."""

    name: str = Field(description="Name of the budget rule")
    values: BudgetScope = Field(
        description="Budget scope values (cluster, namespace, labels)"
    )
    kind: BudgetKind = Field(
        description="Budget type - soft (warnings) or hard (enforcement)"
    )
    interval: BudgetInterval = Field(description="Budget reset interval")
    interval_day: int = Field(
        strict=True,
        ge=1,
        le=31,
        description="Day of week (1-7) or month (1-31) for budget reset",
    )
    spend_limit: float = Field(
        strict=True, ge=0, description="Budget limit in USD"
    )
    actions: list[BudgetAction] = Field(
        description="List of actions to take when budget thresholds are reached"
    )

    @model_validator(mode="after")
    def _check_interval_day(self) -> "BudgetDefinition":
        if self.interval == "weekly" and self.interval_day > 7:
            raise ValueError(
                f"intervalDay must be between 1 and 7 for a weekly budget, "
                f"got {self.interval_day}"
            )
        return self


class BudgetRule(BudgetDefinition):
    """The body POSTed to /model/budget.

    Without an `id` Kubecost creates a new rule; with one it updates the
    existing rule in place.
    """

    id: Optional[str] = None


# -----------------------------------------------------------------------------
# Report queries
# -----------------------------------------------------------------------------
class AssetQuery(KubecostModel):
    """Query parameters for /model/assets."""

    window: str = Field(
        description='Time window for asset data (e.g., "7d", "30d", "1d")'
    )
    aggregate: Optional[str] = Field(
        default=None,
        description='Aggregation level (e.g., "cluster", "namespace", "type")',
    )
    filters: Optional[dict[str, str]] = Field(
        default=None, description="Filters to apply to the asset data"
    )

    def to_params(self) -> dict[str, str]:
        """Flatten into query parameters, omitting anything unset.

        Filters are sent bracket-style: {"namespace": "kube-system"} becomes
        filters[namespace]=kube-system.
        """
        params: dict[str, str] = {}
        for key, value in self.to_wire().items():
            if key == "filters":
                for name, filter_value in value.items():
                    params[f"filters[{name}]"] = filter_value
            elif isinstance(value, bool):
                params[key] = "true" if value else "false"
            else:
                params[key] = value
        return params


class AllocationQuery(AssetQuery):
    """Query parameters for /model/allocation."""

    window: str = Field(
        description='Time window for cost data (e.g., "7d", "30d", "1d")'
    )
    aggregate: Optional[str] = Field(
        default=None,
        description='Aggregation level (e.g., "cluster", "namespace", "pod", "container")',
    )
    accumulate: Optional[bool] = Field(
        default=None,
        strict=True,
        description="Whether to accumulate costs over time",
    )
    filters: Optional[dict[str, str]] = Field(
        default=None, description="Filters to apply to the cost data"
    )
