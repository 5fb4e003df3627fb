"""
Token counting and usage tracking.

Exact token counts from provider usage metadata, plus the character
heuristic used when only text is available.
"""

import math
from dataclasses import dataclass
from typing import Union

# ~4 characters per token
CHARS_PER_TOKEN = 4


@dataclass(frozen=True)
class TokenUsage:
    """Token usage data for cost calculation."""
    prompt_tokens: int
    completion_tokens: int
    cached_tokens: int = 0

    @property
    def total_tokens(self) -> int:
        """Total tokens used (prompt + completion)."""
        return self.prompt_tokens + self.completion_tokens


def count_tokens(value: Union[str, int]) -> int:
    """Return a token count for a raw count or a string.

    Integers pass through unchanged; strings are estimated as
    ceil(len / 4).
    """
    if isinstance(value, str):
        return math.ceil(len(value) / CHARS_PER_TOKEN)
    return int(value)
