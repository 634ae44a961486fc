"""
Shared pytest fixtures for unit tests.

No test touches the network: the fund backend is an in-memory fake served
through ``httpx.MockTransport``, so every gateway call is deterministic and
inspectable.
"""

import json
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

import httpx
import pytest

from fundmanager.core.config import FUND_API_PATH
from fundmanager.services.fund_manager import FundManager
from fundmanager.services.gateway import FundGateway, build_backend_client

BACKEND_ROOT = "http://backend.test"
BACKEND_BASE_URL = f"{BACKEND_ROOT}{FUND_API_PATH}"

# ────────────────────────────────────────────────────────────────────────────
# Factory helpers
# ────────────────────────────────────────────────────────────────────────────


def make_fund(
    fund_id: int = 1,
    *,
    fund_name: str = "Bluechip Equity Fund",
    category: Optional[str] = "Equity",
    risk_level: Optional[str] = "High",
    aum: Optional[float] = 1500.0,
    expense_ratio: Optional[float] = 0.012,
    nav: Optional[float] = 42.5,
    launch_date: Optional[str] = "2020-01-31",
    description: Optional[str] = "Large-cap growth",
) -> Dict[str, Any]:
    """A fund record as the backend would send it (camelCase JSON)."""
    return {
        "fundId": fund_id,
        "fundName": fund_name,
        "category": category,
        "riskLevel": risk_level,
        "aum": aum,
        "expenseRatio": expense_ratio,
        "nav": nav,
        "launchDate": launch_date,
        "description": description,
    }


class FakeFundBackend:
    """
    In-memory stand-in for the fund REST backend.

    Records every request it receives.  Operation names listed in
    ``failing`` (``all``, ``add``, ``update``, ``delete``, ``get``) answer
    HTTP 500 instead.
    """

    def __init__(self, funds: Iterable[Dict[str, Any]] = ()):
        self.funds: Dict[int, Dict[str, Any]] = {f["fundId"]: dict(f) for f in funds}
        self.requests: List[httpx.Request] = []
        self.failing: Set[str] = set()
        self.delete_reply: Optional[httpx.Response] = None

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def calls(self) -> List[Tuple[str, str]]:
        return [(r.method, r.url.path) for r in self.requests]

    def snapshot(self) -> List[Dict[str, Any]]:
        return [dict(f) for f in self.funds.values()]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path[len(FUND_API_PATH) :]
        operation, _, arg = path.lstrip("/").partition("/")

        if operation in self.failing:
            return httpx.Response(500, json={"error": "boom"})

        if request.method == "GET" and operation == "all":
            return httpx.Response(200, json=self.snapshot())

        if request.method == "POST" and operation == "add":
            body = json.loads(request.content)
            self.funds[body["fundId"]] = body
            return httpx.Response(201, json=body)

        if request.method == "PUT" and operation == "update":
            body = json.loads(request.content)
            if body["fundId"] not in self.funds:
                return httpx.Response(404, text="Fund not found")
            self.funds[body["fundId"]] = body
            return httpx.Response(200, json=body)

        if request.method == "DELETE" and operation == "delete":
            if self.delete_reply is not None:
                return self.delete_reply
            fund_id = int(arg)
            if fund_id not in self.funds:
                return httpx.Response(404, text="Fund not found")
            del self.funds[fund_id]
            return httpx.Response(200, text=f"Fund deleted with ID {fund_id}")

        if request.method == "GET" and operation == "get":
            if not arg.isdigit() or int(arg) not in self.funds:
                return httpx.Response(404, json={"message": "Fund not found"})
            return httpx.Response(200, json=self.funds[int(arg)])

        return httpx.Response(404, text="No such route")


# ────────────────────────────────────────────────────────────────────────────
# Pytest fixtures
# ────────────────────────────────────────────────────────────────────────────


@pytest.fixture()
def fake_backend():
    """A backend holding two funds."""
    return FakeFundBackend(
        [
            make_fund(1),
            make_fund(
                2,
                fund_name="Short Term Debt Fund",
                category="Debt",
                risk_level="Low",
                aum=800.0,
                expense_ratio=0.005,
                nav=10.0,
                launch_date=None,
                description=None,
            ),
        ]
    )


@pytest.fixture()
def gateway(fake_backend):
    """A FundGateway talking to the fake backend."""
    client = build_backend_client(base_url=BACKEND_BASE_URL, transport=fake_backend.transport)
    return FundGateway(client)


@pytest.fixture()
def manager(gateway):
    """A FundManager with a fresh state store."""
    return FundManager(gateway)
