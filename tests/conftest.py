"""
Shared fixtures: a Kubecost config, sample budget payloads, and a
KubecostClient wired to an in-process httpx.MockTransport.
"""

import json

import httpx
import pytest

from core.config import KubecostConfig
from core.kubecost_client import KubecostClient

BASE_URL = "http://kubecost.test:9090"


class FakeKubecost:
    """Route table for httpx.MockTransport that records every request."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], httpx.Response] = {}
        self.error: Exception | None = None

    def add(self, method: str, path: str, status_code: int = 200, json_body=None, text=None):
        if json_body is not None:
            response = httpx.Response(status_code, json=json_body)
        else:
            response = httpx.Response(status_code, text=text or "")
        self.routes[(method, path)] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        response = self.routes.get((request.method, request.url.path))
        if response is None:
            return httpx.Response(404, text="not found")
        return response

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict:
        return json.loads(self.last_request.content)


@pytest.fixture
def token_config() -> KubecostConfig:
    return KubecostConfig(base_url=BASE_URL, api_token="secret-token")


@pytest.fixture
def fake_kubecost() -> FakeKubecost:
    return FakeKubecost()


@pytest.fixture
async def kubecost_client(token_config, fake_kubecost):
    client = KubecostClient(token_config, transport=httpx.MockTransport(fake_kubecost.handler))
    yield client
    await client.aclose()


@pytest.fixture
def budget_args() -> dict:
    """A complete create_budget payload, camelCase as an MCP client sends it."""
    return {
        "name": "team-a-monthly",
        "values": {"namespace": ["team-a"], "label": {"app": ["api", "worker"]}},
        "kind": "soft",
        "interval": "monthly",
        "intervalDay": 1,
        "spendLimit": 500,
        "actions": [
            {"percentage": 80, "emails": ["ops@example.com"]},
            {"percentage": 100, "slackWebhooks": ["https://hooks.slack.test/abc"]},
        ],
    }


@pytest.fixture
def budget_response(budget_args) -> dict:
    return {
        **budget_args,
        "id": "b1",
        "createdAt": "2026-10-01T00:00:00Z",
        "updatedAt": "2026-10-01T00:00:00Z",
    }
