import pytest
from unittest.mock import AsyncMock


@pytest.fixture
def upstream_builder():
    from tests.fixtures.mock_clients import UpstreamBuilder
    return UpstreamBuilder()


@pytest.fixture
def api_key(monkeypatch):
    """Configure the upstream credential under its primary name."""
    from config import Config
    monkeypatch.setattr(Config, "DEEPSEEK_API_KEY", "test-key")
    monkeypatch.setattr(Config, "VITE_DEEPSEEK_API_KEY", "")
    return "test-key"


@pytest.fixture
def no_api_key(monkeypatch):
    from config import Config
    monkeypatch.setattr(Config, "DEEPSEEK_API_KEY", "")
    monkeypatch.setattr(Config, "VITE_DEEPSEEK_API_KEY", "")


@pytest.fixture
def no_sleep(monkeypatch):
    """Replace the retry backoff with a mock so delays can be counted."""
    from services.proxy_service import ProxyService
    sleep = AsyncMock()
    monkeypatch.setattr(ProxyService, "wait_before_retry", sleep)
    return sleep


@pytest.fixture
def mock_upstream(monkeypatch, upstream_builder):
    """Route the shared upstream client to the scripted mock upstream."""
    from utils.http_client import HTTPClientManager
    client = upstream_builder.build()
    monkeypatch.setattr(HTTPClientManager, "get_upstream_client", lambda: client)
    return upstream_builder


@pytest.fixture
def chat_payload():
    """Standard inbound proxy body."""
    return {
        "messages": [
            {"role": "system", "content": "You are a career coach."},
            {"role": "user", "content": "How do I improve my CV?"}
        ]
    }


@pytest.fixture
def configured_app(monkeypatch, mock_upstream, no_sleep):
    """App with mocked upstream and backoff. Credential configured separately."""
    from fastapi.testclient import TestClient
    from config import Config
    from main import app

    monkeypatch.setattr(Config, "DEFAULT_STREAM", False)

    with TestClient(app) as client:
        yield client


@pytest.fixture
def local_store():
    from client.history_store import LocalStore
    store = LocalStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def history_store(local_store):
    from client.history_store import ChatHistoryStore
    return ChatHistoryStore(local_store)
