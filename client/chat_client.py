"""
Chat client used by the coaching front end.
Talks to the proxy (or, in direct mode, to the upstream API) in buffered or streaming mode.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable, Iterable, Optional

import httpx

from client.stream_decoder import StreamDecoder
from config import Config
from models.api_models import ChatRequest, CompletionRequest, Message
from utils.errors import ChatClientError
from utils.logger import client_logger


class ChatClient:
    """Client for chat completions through the proxy or directly upstream."""

    def __init__(
        self,
        endpoint: str,
        transport: str = "proxy",
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        if transport not in Config.TRANSPORTS:
            raise ValueError(f"Unknown transport '{transport}', expected one of {Config.TRANSPORTS}")
        if transport == "direct" and not api_key:
            raise ChatClientError("API Key is missing")

        self.endpoint = endpoint
        self.transport = transport
        self.api_key = api_key
        self.model = model
        self._http_client = http_client

    @classmethod
    def from_config(cls, http_client: Optional[httpx.AsyncClient] = None) -> "ChatClient":
        """Build a client for the transport selected in Config."""
        if Config.CHAT_TRANSPORT == "direct":
            return cls(
                Config.get_upstream_url(),
                transport="direct",
                api_key=Config.get_api_key(),
                http_client=http_client
            )
        return cls(Config.PROXY_ENDPOINT, transport="proxy", http_client=http_client)

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return

        async with httpx.AsyncClient(timeout=httpx.Timeout(None, connect=10.0)) as client:
            yield client

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.transport == "direct":
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _build_payload(self, messages: Iterable[Message | dict], stream: bool) -> dict:
        messages = [Message.model_validate(m) for m in messages]

        if self.transport == "direct":
            completion = CompletionRequest(
                model=self.model or Config.DEFAULT_MODEL,
                messages=messages,
                stream=stream
            )
            return completion.to_payload()

        request = ChatRequest(messages=messages, model=self.model, stream=stream)
        return request.model_dump(exclude_none=True)

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Error message from an `{"error": {"message": ...}}` body, or a status fallback."""
        try:
            data = response.json()
        except ValueError:
            data = {}

        error = data.get("error") if isinstance(data, dict) else None
        if isinstance(error, dict) and error.get("message"):
            return error["message"]
        return f"API Error: {response.status_code}"

    async def complete(self, messages: Iterable[Message | dict]) -> str:
        """
        Send the conversation and wait for the whole reply.

        Returns:
            The assistant's response content
        """
        payload = self._build_payload(messages, stream=False)

        async with self._client() as client:
            response = await client.post(self.endpoint, headers=self._headers(), json=payload)

        if not response.is_success:
            message = self._error_message(response)
            client_logger.error(f"Chat completion failed: {message}")
            raise ChatClientError(message, response.status_code)

        data = response.json()
        return data["choices"][0]["message"]["content"]

    async def stream_chat(
        self,
        messages: Iterable[Message | dict],
        on_chunk: Callable[[str], None]
    ) -> str:
        """
        Stream the reply, calling `on_chunk` with every text delta in arrival order.

        Transport errors propagate to the caller unchanged; nothing is retried here.

        Returns:
            The full reply assembled from all deltas
        """
        payload = self._build_payload(messages, stream=True)
        parts: list[str] = []

        async with self._client() as client:
            async with client.stream("POST", self.endpoint, headers=self._headers(), json=payload) as response:
                if not response.is_success:
                    await response.aread()
                    message = self._error_message(response)
                    client_logger.error(f"Chat stream failed to start: {message}")
                    raise ChatClientError(message, response.status_code)

                decoder = StreamDecoder()
                async for chunk in response.aiter_bytes():
                    for delta in decoder.feed(chunk):
                        parts.append(delta)
                        on_chunk(delta)
                    if decoder.done:
                        break

                for delta in decoder.close():
                    parts.append(delta)
                    on_chunk(delta)

        client_logger.info(f"Chat stream complete: {len(parts)} deltas, {sum(map(len, parts))} characters")
        return "".join(parts)
