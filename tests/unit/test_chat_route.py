import httpx
import pytest
from starlette.background import BackgroundTask

from models.api_models import ChatRequest, Message
from routes.chat import chat
from services.proxy_service import ProxyService


@pytest.mark.anyio
async def test_streaming_response_closes_upstream_when_body_is_never_read(mocker):
    """Given a client that goes away before the first chunk, the background task still closes upstream."""
    async def body():
        yield b"data: [DONE]\n\n"

    upstream = httpx.Response(200, headers={"Content-Type": "text/event-stream"}, content=body())
    mocker.patch.object(ProxyService, "open_stream", return_value=upstream)
    request = ChatRequest(messages=[Message(role="user", content="Hi")], stream=True)

    response = await chat(request, api_key="test-key")

    assert isinstance(response.background, BackgroundTask)
    assert not upstream.is_closed
    await response.background()
    assert upstream.is_closed
