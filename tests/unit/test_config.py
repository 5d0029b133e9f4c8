import pytest

from config import Config
from models.api_models import ChatRequest, CompletionRequest


@pytest.mark.parametrize("primary,legacy,expected", [
    ("primary-key", "", "primary-key"),
    ("", "legacy-key", "legacy-key"),
    ("primary-key", "legacy-key", "primary-key"),
    ("", "", None),
])
def test_get_api_key_prefers_primary_name(monkeypatch, primary, legacy, expected):
    """Given the two credential names, the primary wins and absence is never defaulted."""
    monkeypatch.setattr(Config, "DEEPSEEK_API_KEY", primary)
    monkeypatch.setattr(Config, "VITE_DEEPSEEK_API_KEY", legacy)
    assert Config.get_api_key() == expected


@pytest.mark.parametrize("base_url", ["https://api.deepseek.com", "https://api.deepseek.com/"])
def test_get_upstream_url(monkeypatch, base_url):
    monkeypatch.setattr(Config, "UPSTREAM_BASE_URL", base_url)
    assert Config.get_upstream_url() == "https://api.deepseek.com/chat/completions"


def test_validate_warns_on_missing_credential(monkeypatch, caplog):
    monkeypatch.setattr(Config, "DEEPSEEK_API_KEY", "")
    monkeypatch.setattr(Config, "VITE_DEEPSEEK_API_KEY", "")

    Config.validate()

    assert "DEEPSEEK_API_KEY not found" in caplog.text


@pytest.mark.parametrize("default,requested,expected", [
    (False, None, False),
    (True, None, True),
    (False, True, True),
    (True, False, False),
])
def test_chat_request_stream_mode(monkeypatch, default, requested, expected):
    """Given a deployment default and an optional request flag, the request flag wins."""
    monkeypatch.setattr(Config, "DEFAULT_STREAM", default)
    request = ChatRequest(messages=[{"role": "user", "content": "hi"}], stream=requested)
    assert request.wants_stream() is expected


def test_completion_request_defaults_model(monkeypatch):
    monkeypatch.setattr(Config, "DEFAULT_MODEL", "deepseek-chat")
    request = ChatRequest(messages=[{"role": "user", "content": "hi"}])

    completion = CompletionRequest.from_chat_request(request, stream=True)

    assert completion.model == "deepseek-chat"
    assert completion.temperature == 0.7
    assert completion.max_tokens == 2000
    assert completion.stream is True


def test_completion_request_keeps_caller_model():
    request = ChatRequest(messages=[{"role": "user", "content": "hi"}], model="deepseek-reasoner")
    assert CompletionRequest.from_chat_request(request, stream=False).model == "deepseek-reasoner"
