import os

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

# No external API keys for tests: the app runs in stub-only mode
os.environ["OPENAI_API_KEY"] = ""
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["LLM_PROVIDER"] = "auto"
os.environ["LLM_MODEL"] = ""
os.environ["RELAY_TTL_SECONDS"] = "900"

from vetnotes.errors import EmptyResponse
from vetnotes.main import app
from vetnotes.services.llm import GenerationConfig, LLMClient, get_llm_client
from vetnotes.services.relay_store import RelayStore


class FakeLLM(LLMClient):
    """Gateway double: always available, answers with ``reply`` or raises ``error``."""

    def __init__(self, reply: str = "", error: Exception | None = None) -> None:
        super().__init__(provider="openai")
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, str, GenerationConfig]] = []

    def available(self) -> bool:
        return True

    async def generate_text(self, system: str, user: str, config: GenerationConfig) -> str:
        self.calls.append((system, user, config))
        if self.error is not None:
            raise self.error
        if not self.reply.strip():
            raise EmptyResponse("blank reply")
        return self.reply


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_llm():
    """Factory for gateway doubles."""
    return FakeLLM


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture(autouse=True)
def relay_store(clock):
    """Give every test a fresh relay store driven by the fake clock."""
    store = RelayStore(ttl_seconds=900, clock=clock)
    app.state.relay_store = store
    yield store
    app.state.relay_store = RelayStore()


@pytest.fixture
def use_llm():
    """Route every request's gateway dependency to the given client."""

    def _install(llm: LLMClient) -> LLMClient:
        app.dependency_overrides[get_llm_client] = lambda: llm
        return llm

    yield _install
    app.dependency_overrides.pop(get_llm_client, None)


@pytest.fixture
def client():
    """Provide a synchronous TestClient for HTTP endpoint tests."""
    return TestClient(app)


@pytest_asyncio.fixture
async def async_client():
    """Provide an async httpx client for async HTTP tests."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
