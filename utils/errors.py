"""
Error types shared by the proxy and the chat client.
"""
from typing import Optional

OVERLOADED_MESSAGE = "DeepSeek is currently overloaded or unreachable. Please try again in a moment."
MISSING_CREDENTIAL_MESSAGE = "Server configuration error provided. API Key missing."
INTERNAL_ERROR_MESSAGE = "The chat proxy failed to process the request."


class ProxyError(Exception):
    """Base error answered by the proxy with a structured error body."""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        """Response body in the `{"error": {...}}` shape."""
        error = {"message": self.message}
        if self.details is not None:
            error["details"] = self.details
        return {"error": error}


class MissingCredentialError(ProxyError):
    """Upstream credential is not configured."""

    status_code = 500

    def __init__(self):
        super().__init__(MISSING_CREDENTIAL_MESSAGE)


class UpstreamUnavailableError(ProxyError):
    """Upstream failed: retries exhausted, or the stream could not be opened."""

    status_code = 502

    def __init__(self, details: str):
        super().__init__(OVERLOADED_MESSAGE, details=details or "Unknown error after retries")


class InternalProxyError(ProxyError):
    """Unexpected failure inside the proxy itself."""

    status_code = 500

    def __init__(self, details: str):
        super().__init__(INTERNAL_ERROR_MESSAGE, details=details)


class ChatClientError(Exception):
    """Raised by the chat client when the proxy or upstream answers with an error."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
