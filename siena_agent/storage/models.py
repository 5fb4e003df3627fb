"""
Data models for storage layer.

Defines the usage ledger entity.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class LLMUsageEvent:
    """Immutable record of one successful language call.

    Append-only events that create an auditable ledger of agent spend.
    Once written, these records must never be modified.
    """
    timestamp: datetime
    agent: str
    model: str
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    estimated_cost: float
    cached_tokens: int = 0
    retry_count: int = 0
    request_id: Optional[str] = None
