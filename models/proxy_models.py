"""
Data models for proxy processing.
Contains retry bookkeeping and the result of a buffered upstream call.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class AttemptOutcome(Enum):
    """Outcome of one upstream attempt."""
    SUCCESS = "success"
    RETRYABLE_FAILURE = "retryable_failure"
    TERMINAL_FAILURE = "terminal_failure"


@dataclass
class RetryAttempt:
    """One upstream attempt, kept only for the lifetime of a request."""
    attempt_number: int
    outcome: AttemptOutcome
    status_code: Optional[int] = None
    detail: Optional[str] = None


@dataclass
class ProxyResult:
    """Response the proxy hands back to the caller in buffered mode."""
    status_code: int
    body: Any
    attempts: list[RetryAttempt] = field(default_factory=list)

    @property
    def attempt_count(self) -> int:
        return len(self.attempts)
