"""
Thinking shape: model speed, reasoning depth, and trace inclusion.

Governs how a single generative call is configured.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class ThoughtSpeed(str, Enum):
    """Models available to the brain, chosen by task complexity."""
    THOUGHTFUL = "gemini-3-pro-preview"  # deep reasoning, structured output
    STANDARD = "gemini-3-flash-preview"
    FAST = "gemini-2.5-pro"
    FASTER = "gemini-2.5-flash"
    EXTREME = "gemini-flash-lite"


class EmbeddingModel(str, Enum):
    """Embedding models."""
    STANDARD = "gemini-embedding-001"


class ThinkingLevel(str, Enum):
    """Provider reasoning-depth parameter."""
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    MINIMAL = "MINIMAL"
    THINKING_LEVEL_UNSPECIFIED = "THINKING_LEVEL_UNSPECIFIED"


class ThoughtClarity(str, Enum):
    """Qualitative reasoning effort requested by a caller."""
    CLEAR = "CLEAR"
    INTUITIVE = "INTUITIVE"
    IMPRESSIONISTIC = "IMPRESSIONISTIC"
    CONFUSED = "CONFUSED"
    UNSPECIFIED = "UNSPECIFIED"


DEFAULT_SPEED = ThoughtSpeed.EXTREME

_CLARITY_TO_LEVEL = {
    ThoughtClarity.CLEAR: ThinkingLevel.HIGH,
    ThoughtClarity.INTUITIVE: ThinkingLevel.MEDIUM,
    ThoughtClarity.IMPRESSIONISTIC: ThinkingLevel.MINIMAL,
    ThoughtClarity.CONFUSED: ThinkingLevel.MINIMAL,
    ThoughtClarity.UNSPECIFIED: ThinkingLevel.THINKING_LEVEL_UNSPECIFIED,
}

# These models reject the thinking level parameter
_SPEEDS_WITHOUT_TRACE = frozenset({
    ThoughtSpeed.FAST.value,
    ThoughtSpeed.FASTER.value,
    ThoughtSpeed.EXTREME.value,
})


def clarity_to_thinking_level(
    clarity: Union[ThoughtClarity, ThinkingLevel, None]
) -> ThinkingLevel:
    """Map a clarity level to the provider's thinking level.

    ThinkingLevel values pass through unchanged; anything unrecognized
    maps to THINKING_LEVEL_UNSPECIFIED.
    """
    if isinstance(clarity, ThinkingLevel):
        return clarity
    return _CLARITY_TO_LEVEL.get(clarity, ThinkingLevel.THINKING_LEVEL_UNSPECIFIED)


def supports_trace(model: Union[str, ThoughtSpeed]) -> bool:
    """Whether a model accepts a thinking configuration block."""
    return str(getattr(model, "value", model)) not in _SPEEDS_WITHOUT_TRACE


@dataclass(frozen=True)
class ThinkingShape:
    """Speed, depth, and trace flag for one generative call.

    clarity only takes effect when include_thoughts is true and the
    selected model supports a trace.
    """
    speed: ThoughtSpeed = ThoughtSpeed.FASTER
    clarity: Union[ThoughtClarity, ThinkingLevel] = ThoughtClarity.INTUITIVE
    include_thoughts: bool = False

    @property
    def thinking_level(self) -> ThinkingLevel:
        return clarity_to_thinking_level(self.clarity)


@dataclass
class GenAIState:
    """Mutable cognitive configuration shared by an agent's faculties.

    Callers may replace the shape or instruction between calls; the
    gateway reads it at call time.
    """
    shape: ThinkingShape
    system_instruction: str = ""
