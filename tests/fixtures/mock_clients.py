import json
import httpx


class UpstreamBuilder:
    """Factory for mock upstreams answering a scripted sequence of responses."""

    def __init__(self):
        self.responses = []
        self.requests: list[httpx.Request] = []

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def respond(self, status_code, body=None, text=None, headers=None):
        """Queue a JSON (or raw text) response."""
        self.responses.append(("response", status_code, body, text, headers))
        return self

    def respond_stream(self, chunks, status_code=200, headers=None):
        """Queue an event-stream response delivered in the given byte chunks, sent as-is on the wire."""
        self.responses.append(("stream", status_code, chunks, None, headers))
        return self

    def fail(self, message="connection refused"):
        """Queue a transport failure."""
        self.responses.append(("error", None, message, None, None))
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        kind, status_code, body, text, headers = (
            self.responses.pop(0) if self.responses else ("response", 200, {}, None, None)
        )

        if kind == "error":
            raise httpx.ConnectError(body, request=request)

        if kind == "stream":
            async def byte_stream():
                for chunk in body:
                    yield chunk.encode() if isinstance(chunk, str) else chunk
            return httpx.Response(
                status_code,
                headers={"Content-Type": "text/event-stream", **(headers or {})},
                content=byte_stream()
            )

        if text is not None:
            return httpx.Response(status_code, text=text, headers=headers)
        return httpx.Response(status_code, json=body, headers=headers)

    def build(self) -> httpx.AsyncClient:
        """Build an AsyncClient routed to this mock upstream."""
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def sent_payload(self, index=-1) -> dict:
        return json.loads(self.requests[index].content)
