"""
Models package exports.
"""
from models.api_models import Message, ChatRequest, CompletionRequest, UserContext
from models.proxy_models import AttemptOutcome, RetryAttempt, ProxyResult

__all__ = [
    'Message',
    'ChatRequest',
    'CompletionRequest',
    'UserContext',
    'AttemptOutcome',
    'RetryAttempt',
    'ProxyResult'
]
