import asyncio
import copy

import httpx
import pytest

from dashboard.api_client import MapleApiClient
from dashboard.config import DashboardSettings
from dashboard.session import DashboardSession
from dashboard.token_store import TokenStore


KEY_INFO = {
    "username": "alice",
    "plan": "pro",
    "admin": False,
    "banned": False,
    "rpm": "60",
    "rpm_used": "12",
    "rpd": "1000",
    "rpd_used": "850",
    "total_usage": 123456,
    "total_tokens_used": "9876543",
}

USAGE_HISTORY = {
    "labels": ["2024-01-01", "2024-01-02", "2024-01-03"],
    "data": [10, 20, 15],
}

SERVICE_STATUS = {
    "status": "online",
    "requests": 1234567,
    "environment": "production",
    "total_tokens_used": "555000",
    "endpoints": ["/v1/chat/completions", "/v1/models"],
}

NETWORK_DOWN = "network-down"


class FakeApi:
    """Programmable stand-in for the Maple API behind httpx.MockTransport."""

    def __init__(self):
        self.responses = {
            "/": (200, copy.deepcopy(SERVICE_STATUS)),
            "/v1/key-info": (200, copy.deepcopy(KEY_INFO)),
            "/v1/usage-history": (200, copy.deepcopy(USAGE_HISTORY)),
        }
        self.calls = []
        self.gate = None
        self.entered = None

    def set(self, path, status, body=None):
        self.responses[path] = (status, body if body is not None else {"error": "nope"})

    def hold(self):
        """Make authenticated requests wait until release() is called."""
        self.gate = asyncio.Event()
        self.entered = asyncio.Event()

    def release(self):
        self.gate.set()

    async def handler(self, request):
        path = request.url.path
        self.calls.append((path, request.headers.get("authorization")))
        if self.gate is not None and path != "/":
            self.entered.set()
            await self.gate.wait()
        status, body = self.responses[path]
        if status == NETWORK_DOWN:
            raise httpx.ConnectError("Name or service not known", request=request)
        return httpx.Response(status, json=body)

    def client(self):
        return MapleApiClient(base_url="https://api.test", transport=httpx.MockTransport(self.handler))

    def paths(self):
        return [path for path, _ in self.calls]


class FakeClock:
    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def token_file(tmp_path):
    return str(tmp_path / "state" / "token.json")


@pytest.fixture
def make_session(fake_api, clock, token_file):
    def factory(**overrides):
        settings = DashboardSettings(api_base="https://api.test", token_file=token_file, **overrides)
        return DashboardSession(
            settings,
            client=fake_api.client(),
            token_store=TokenStore(path=token_file),
            clock=clock,
        )

    return factory
