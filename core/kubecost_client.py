# =============================================================================
# core/kubecost_client.py  —  Async HTTP client for the Kubecost API
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Wraps the handful of Kubecost REST endpoints this server exposes.  One
#   coroutine per endpoint, each returning the parsed JSON body as-is.
#
#     create_or_update_budget → POST   /model/budget
#     get_budget              → GET    /model/budget/{id}
#     list_budgets            → GET    /model/budget
#     delete_budget           → DELETE /model/budget/{id}
#     get_cost_allocation     → GET    /model/allocation
#     get_assets              → GET    /model/assets
#     health_check            → GET    /healthz
#
# ERRORS:
#   Every method except health_check lets httpx errors propagate untouched
#   (HTTPStatusError for non-2xx, TimeoutException, TransportError).  The
#   dispatcher turns them into error envelopes.  Nothing is retried.
#
#   health_check never raises: any failure means "not healthy".
# =============================================================================

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from core.config import KubecostConfig
from core.models import AllocationQuery, AssetQuery, BudgetRule

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 30.0

BUDGET_PATH = "/model/budget"
ALLOCATION_PATH = "/model/allocation"
ASSETS_PATH = "/model/assets"
HEALTH_PATH = "/healthz"


def _budget_path(budget_id: str) -> str:
    # The id is one path segment; "/" and "?" inside it stay escaped.
    return f"{BUDGET_PATH}/{quote(budget_id, safe='')}"


class KubecostClient:
    """Thin async wrapper around the Kubecost REST API.

    Holds a single pooled httpx.AsyncClient configured from a KubecostConfig.
    The bearer token wins over basic auth when both are configured.

    Usage:
        async with KubecostClient(config) as client:
            budgets = await client.list_budgets()
    """

    def __init__(
        self,
        config: KubecostConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config

        headers = {"Content-Type": "application/json"}
        auth: Optional[httpx.BasicAuth] = None
        if config.api_token:
            headers["Authorization"] = f"Bearer {config.api_token}"
        elif config.has_basic_auth:
            auth = httpx.BasicAuth(config.username, config.password)

        self._http = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=REQUEST_TIMEOUT_SECONDS,
            headers=headers,
            auth=auth,
            transport=transport,
        )

    async def __aenter__(self) -> "KubecostClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        logger.debug("%s %s", method, path)
        response = await self._http.request(method, path, **kwargs)
        response.raise_for_status()
        if not response.content:
            return None
        return response.json()

    # -------------------------------------------------------------------------
    # Budgets
    # -------------------------------------------------------------------------
    async def create_or_update_budget(self, rule: BudgetRule) -> Any:
        """Create a budget rule, or update it if `rule.id` is set."""
        return await self._request("POST", BUDGET_PATH, json=rule.to_wire())

    async def get_budget(self, budget_id: str) -> Any:
        return await self._request("GET", _budget_path(budget_id))

    async def list_budgets(self) -> Any:
        return await self._request("GET", BUDGET_PATH)

    async def delete_budget(self, budget_id: str) -> None:
        await self._request("DELETE", _budget_path(budget_id))

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------
    async def get_cost_allocation(self, query: AllocationQuery) -> Any:
        return await self._request("GET", ALLOCATION_PATH, params=query.to_params())

    async def get_assets(self, query: AssetQuery) -> Any:
        return await self._request("GET", ASSETS_PATH, params=query.to_params())

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------
    async def health_check(self) -> bool:
        """Return True if /healthz answers with a success status, else False."""
        # The body is ignored: /healthz may answer with plain text.
        try:
            response = await self._http.get(HEALTH_PATH)
            response.raise_for_status()
        except Exception as e:
            logger.warning(f"Kubecost health check failed: {e}")
            return False
        return True
