"""
Unit tests for thinking shapes.
"""

from siena_agent.core.thinking import (
    DEFAULT_SPEED,
    GenAIState,
    ThinkingLevel,
    ThinkingShape,
    ThoughtClarity,
    ThoughtSpeed,
    clarity_to_thinking_level,
    supports_trace,
)


class TestClarityMapping:
    """Test clarity to provider thinking level mapping."""

    def test_all_clarity_levels(self):
        assert clarity_to_thinking_level(ThoughtClarity.CLEAR) == ThinkingLevel.HIGH
        assert clarity_to_thinking_level(ThoughtClarity.INTUITIVE) == ThinkingLevel.MEDIUM
        assert clarity_to_thinking_level(ThoughtClarity.IMPRESSIONISTIC) == ThinkingLevel.MINIMAL
        assert clarity_to_thinking_level(ThoughtClarity.CONFUSED) == ThinkingLevel.MINIMAL
        assert (clarity_to_thinking_level(ThoughtClarity.UNSPECIFIED)
                == ThinkingLevel.THINKING_LEVEL_UNSPECIFIED)

    def test_thinking_level_passes_through(self):
        assert clarity_to_thinking_level(ThinkingLevel.LOW) == ThinkingLevel.LOW

    def test_none_is_unspecified(self):
        assert clarity_to_thinking_level(None) == ThinkingLevel.THINKING_LEVEL_UNSPECIFIED


class TestSupportsTrace:

    def test_gemini_3_models_support_trace(self):
        assert supports_trace(ThoughtSpeed.THOUGHTFUL)
        assert supports_trace(ThoughtSpeed.STANDARD.value)

    def test_older_models_do_not(self):
        assert not supports_trace(ThoughtSpeed.FAST)
        assert not supports_trace("gemini-2.5-flash")
        assert not supports_trace(ThoughtSpeed.EXTREME)

    def test_unknown_model_assumed_capable(self):
        assert supports_trace("some-future-model")


class TestThinkingShape:

    def test_defaults(self):
        shape = ThinkingShape()
        assert shape.speed == ThoughtSpeed.FASTER
        assert shape.clarity == ThoughtClarity.INTUITIVE
        assert shape.include_thoughts is False
        assert shape.thinking_level == ThinkingLevel.MEDIUM

    def test_system_default_speed(self):
        assert DEFAULT_SPEED == ThoughtSpeed.EXTREME

    def test_state_is_mutable(self):
        state = GenAIState(shape=ThinkingShape())
        state.system_instruction = "new"
        state.shape = ThinkingShape(speed=ThoughtSpeed.THOUGHTFUL)
        assert state.shape.speed == ThoughtSpeed.THOUGHTFUL
        assert state.system_instruction == "new"
