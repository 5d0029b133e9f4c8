"""
HTTP client utilities with connection pooling.
Provides a reusable httpx client for calls to the upstream model API.
"""
import httpx
from config import Config


class HTTPClientManager:
    """Manages the shared upstream httpx client."""

    _upstream_client: httpx.AsyncClient | None = None

    @classmethod
    def get_upstream_client(cls) -> httpx.AsyncClient:
        """
        Get or create a shared httpx client for upstream completions.

        Features:
        - Connection pooling (reuses TCP connections)
        - Bounded connect timeout, read timeout only when configured,
          so long generations and open streams are not cut off

        Returns:
            Configured httpx.AsyncClient for upstream calls
        """
        if cls._upstream_client is None:
            limits = httpx.Limits(
                max_connections=100,
                max_keepalive_connections=20,
                keepalive_expiry=60.0
            )

            timeout = httpx.Timeout(
                Config.UPSTREAM_READ_TIMEOUT,
                connect=Config.UPSTREAM_CONNECT_TIMEOUT
            )

            cls._upstream_client = httpx.AsyncClient(
                timeout=timeout,
                limits=limits,
                http2=True
            )

        return cls._upstream_client

    @classmethod
    async def close_all(cls) -> None:
        """
        Close all managed clients and clean up connections.
        """
        if cls._upstream_client is not None:
            await cls._upstream_client.aclose()
            cls._upstream_client = None
