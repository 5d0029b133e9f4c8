"""
Proxy service containing the upstream forwarding logic.
Handles credential injection, bounded retry for buffered completions,
and opening/relaying upstream event streams.
"""
import asyncio
from typing import AsyncIterator, Optional

import httpx

from config import Config
from models.api_models import CompletionRequest
from models.proxy_models import AttemptOutcome, ProxyResult, RetryAttempt
from utils.errors import UpstreamUnavailableError
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


class ProxyService:
    """Service forwarding chat completions to the upstream model API."""

    @staticmethod
    def build_headers(api_key: str) -> dict:
        """Headers for the upstream call."""
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }

    @staticmethod
    async def wait_before_retry(delay: float) -> None:
        """Fixed backoff between two attempts."""
        await asyncio.sleep(delay)

    @staticmethod
    def _describe_transport_error(exc: Exception) -> str:
        return f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__

    @staticmethod
    def _json_or_empty(response: httpx.Response) -> dict:
        """Best-effort JSON body of an upstream error response."""
        try:
            return response.json()
        except ValueError:
            return {}

    @staticmethod
    def _classify(response: httpx.Response, attempt: int) -> tuple[RetryAttempt, Optional[object]]:
        """
        Map an upstream response to an attempt outcome.

        Returns:
            Tuple of (attempt record, parsed body for success or terminal outcomes)
        """
        status = response.status_code

        if response.is_success:
            try:
                data = response.json()
            except ValueError:
                return RetryAttempt(
                    attempt, AttemptOutcome.RETRYABLE_FAILURE, status,
                    f"Upstream returned invalid JSON with status {status}"
                ), None
            return RetryAttempt(attempt, AttemptOutcome.SUCCESS, status), data

        if status >= 500:
            return RetryAttempt(
                attempt, AttemptOutcome.RETRYABLE_FAILURE, status,
                f"Upstream 5xx Error: {status} - {response.text}"
            ), None

        return RetryAttempt(
            attempt, AttemptOutcome.TERMINAL_FAILURE, status,
            f"Upstream client error: {status}"
        ), ProxyService._json_or_empty(response)

    @staticmethod
    async def forward_buffered(
        completion: CompletionRequest,
        api_key: str,
        max_retries: int = None,
        retry_delay: float = None
    ) -> ProxyResult:
        """Forward a non-streaming completion with bounded, serial retry.

        2xx and terminal (non-5xx) responses are returned on first occurrence.
        5xx responses and transport failures are retried after a fixed delay,
        with no wait after the final attempt.

        Args:
            completion: Upstream request body
            api_key: Upstream bearer credential
            max_retries: Attempt bound (defaults to Config)
            retry_delay: Seconds between attempts (defaults to Config)

        Returns:
            ProxyResult with the status and body to answer with

        Raises:
            UpstreamUnavailableError: When every attempt failed
        """
        if max_retries is None:
            max_retries = Config.MAX_RETRIES
        if retry_delay is None:
            retry_delay = Config.RETRY_DELAY_SECONDS

        client = HTTPClientManager.get_upstream_client()
        url = Config.get_upstream_url()
        headers = ProxyService.build_headers(api_key)
        payload = completion.to_payload()

        attempts: list[RetryAttempt] = []
        last_error: Optional[str] = None

        for attempt in range(1, max_retries + 1):
            app_logger.info(f"Attempt {attempt}/{max_retries} calling upstream model '{completion.model}'")

            try:
                response = await client.post(url, headers=headers, json=payload)
            except httpx.RequestError as e:
                record = RetryAttempt(
                    attempt, AttemptOutcome.RETRYABLE_FAILURE,
                    detail=ProxyService._describe_transport_error(e)
                )
                body = None
            else:
                record, body = ProxyService._classify(response, attempt)

            attempts.append(record)

            if record.outcome == AttemptOutcome.SUCCESS:
                app_logger.info(f"Attempt {attempt} succeeded")
                return ProxyResult(status_code=200, body=body, attempts=attempts)

            if record.outcome == AttemptOutcome.TERMINAL_FAILURE:
                app_logger.warning(f"Attempt {attempt} rejected by upstream with status {record.status_code}, not retrying")
                return ProxyResult(status_code=record.status_code, body=body, attempts=attempts)

            last_error = record.detail
            app_logger.warning(f"Attempt {attempt} failed: {last_error}")

            if attempt < max_retries:
                await ProxyService.wait_before_retry(retry_delay)

        app_logger.error(f"Upstream unavailable after {max_retries} attempts")
        raise UpstreamUnavailableError(last_error)

    @staticmethod
    async def open_stream(completion: CompletionRequest, api_key: str) -> httpx.Response:
        """
        Open a streaming completion. Single attempt, no retry.

        Returns:
            The open upstream response; the caller owns closing it

        Raises:
            UpstreamUnavailableError: On transport failure or non-2xx status
        """
        client = HTTPClientManager.get_upstream_client()
        request = client.build_request(
            "POST",
            Config.get_upstream_url(),
            headers=ProxyService.build_headers(api_key),
            json=completion.to_payload()
        )

        app_logger.info(f"Opening upstream stream for model '{completion.model}'")

        try:
            response = await client.send(request, stream=True)
        except httpx.RequestError as e:
            detail = ProxyService._describe_transport_error(e)
            app_logger.error(f"Upstream stream failed to open: {detail}")
            raise UpstreamUnavailableError(detail) from e

        if not response.is_success:
            try:
                await response.aread()
                detail = f"Upstream Error: {response.status_code} - {response.text}"
            finally:
                await response.aclose()
            app_logger.error(f"Upstream stream rejected: {detail}")
            raise UpstreamUnavailableError(detail)

        return response

    @staticmethod
    async def relay_stream(response: httpx.Response) -> AsyncIterator[bytes]:
        """Yield the decoded upstream body bytes, closing the upstream when done or abandoned."""
        relayed = 0
        try:
            async for chunk in response.aiter_bytes():
                relayed += len(chunk)
                yield chunk
        finally:
            await response.aclose()
            app_logger.info(f"Upstream stream closed after relaying {relayed} bytes")
