"""
Route handlers for the chat proxy.
Handles the /chat endpoint in buffered and streaming mode.
"""
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask
from config import Config
from models.api_models import ChatRequest, CompletionRequest
from services.proxy_service import ProxyService
from utils.errors import InternalProxyError, MissingCredentialError, ProxyError
from utils.logger import app_logger

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no"
}


def require_api_key() -> str:
    """Resolve the upstream credential before the request body is processed."""
    api_key = Config.get_api_key()
    if not api_key:
        app_logger.error("Server Error: DEEPSEEK_API_KEY is missing.")
        raise MissingCredentialError()
    return api_key


@router.post("/chat")
async def chat(request: ChatRequest, api_key: str = Depends(require_api_key)):
    """
    Forward a chat completion upstream.
    Buffered requests are retried on transient failures; streamed requests are piped through as-is.
    """
    try:
        stream = request.wants_stream()
        completion = CompletionRequest.from_chat_request(request, stream=stream)
        app_logger.info(f"Chat request: {len(completion.messages)} messages, stream={stream}")

        if stream:
            upstream = await ProxyService.open_stream(completion, api_key)
            return StreamingResponse(
                ProxyService.relay_stream(upstream),
                media_type="text/event-stream",
                headers=SSE_HEADERS,
                background=BackgroundTask(upstream.aclose)
            )

        result = await ProxyService.forward_buffered(completion, api_key)
        return JSONResponse(status_code=result.status_code, content=result.body)

    except ProxyError:
        raise
    except Exception as e:
        app_logger.error(f"Chat proxy error: {str(e)}")
        raise InternalProxyError(str(e)) from e
