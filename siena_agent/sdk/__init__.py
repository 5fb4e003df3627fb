"""
SDK for Siena Agent.

Retrying language gateway and the Google GenAI client adapter.
"""

from .gateway import (
    CallOutcome,
    CallRequest,
    LanguageGateway,
    MaxRetriesExceeded,
    RetryPolicy,
    is_retryable,
)

__all__ = [
    "CallOutcome",
    "CallRequest",
    "LanguageGateway",
    "MaxRetriesExceeded",
    "RetryPolicy",
    "is_retryable",
]
