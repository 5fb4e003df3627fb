"""
Unit tests for configuration loading and validation.

Tests strict validation and error handling for agent configs.
"""

import os
import tempfile

import pytest
import yaml

from siena_agent.config.loader import (
    DEFAULT_ROOT_INSTRUCTION,
    AgentConfig,
    default_agent_config,
    load_agent_config,
)
from siena_agent.core.budget import BreachAction
from siena_agent.core.thinking import ThinkingLevel, ThoughtClarity, ThoughtSpeed


class TestDefaultConfig:

    def test_defaults(self):
        config = default_agent_config()
        assert config.shape.speed == ThoughtSpeed.FASTER
        assert config.shape.clarity == ThoughtClarity.INTUITIVE
        assert config.retry.max_attempts == 5
        assert config.budget is None
        assert config.ledger_path is None

    def test_initial_instruction_falls_back_to_root(self):
        assert default_agent_config().initial_instruction == DEFAULT_ROOT_INSTRUCTION
        assert AgentConfig(system_instruction="Custom").initial_instruction == "Custom"


class TestConfigLoading:
    """Test configuration loading and validation."""

    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        """Clean up test environment."""
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_config(self, config_data, filename: str = "config.yaml") -> str:
        """Write configuration data to temporary file."""
        config_path = os.path.join(self.temp_dir, filename)
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f)
        return config_path

    def test_valid_config_loads_correctly(self):
        config_path = self._write_config({
            "thinking": {"speed": "THOUGHTFUL", "clarity": "clear", "include_thoughts": True},
            "system_instruction": "Be a novelist.",
            "memory_dir": "out/memory",
            "retry": {"max_attempts": 3, "initial_delay": 0.5},
            "budget": {"max_cost_per_call": 0.5, "limit": 10, "action_on_breach": "warn"},
            "ledger": {"db_path": "usage.db"},
        })

        config = load_agent_config(config_path)

        assert config.shape.speed == ThoughtSpeed.THOUGHTFUL
        assert config.shape.clarity == ThoughtClarity.CLEAR
        assert config.shape.include_thoughts is True
        assert config.system_instruction == "Be a novelist."
        assert config.memory_dir == "out/memory"
        assert config.retry.max_attempts == 3
        assert config.retry.initial_delay == 0.5
        assert config.budget.max_cost_per_call == 0.5
        assert config.budget.budget_limit == 10.0
        assert config.budget.on_breach == BreachAction.WARN
        assert config.ledger_path == "usage.db"

    def test_speed_accepts_model_identifier(self):
        config = load_agent_config(self._write_config({"thinking": {"speed": "gemini-2.5-pro"}}))
        assert config.shape.speed == ThoughtSpeed.FAST

    def test_clarity_accepts_thinking_level(self):
        config = load_agent_config(self._write_config({"thinking": {"clarity": "LOW"}}))
        assert config.shape.clarity == ThinkingLevel.LOW

    def test_missing_sections_use_defaults(self):
        config = load_agent_config(self._write_config({"memory_dir": "elsewhere"}))
        assert config.shape == default_agent_config().shape
        assert config.retry == default_agent_config().retry
        assert config.budget is None

    def test_budget_action_defaults_to_block(self):
        config = load_agent_config(self._write_config({"budget": {"limit": 5}}))
        assert config.budget.on_breach == BreachAction.BLOCK

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_agent_config(os.path.join(self.temp_dir, "nope.yaml"))

    def test_empty_file(self):
        config_path = os.path.join(self.temp_dir, "empty.yaml")
        open(config_path, "w").close()
        with pytest.raises(ValueError, match="empty"):
            load_agent_config(config_path)

    def test_invalid_yaml(self):
        config_path = os.path.join(self.temp_dir, "bad.yaml")
        with open(config_path, "w") as f:
            f.write("thinking: [unclosed")
        with pytest.raises(yaml.YAMLError):
            load_agent_config(config_path)

    @pytest.mark.parametrize("config_data, match", [
        ({"unknown": 1}, "Unknown keys in configuration"),
        ({"thinking": {"depth": "HIGH"}}, "Unknown keys in thinking"),
        ({"thinking": {"speed": "warp"}}, "thinking.speed"),
        ({"thinking": {"clarity": "murky"}}, "thinking.clarity"),
        ({"thinking": {"include_thoughts": "yes"}}, "include_thoughts"),
        ({"thinking": "fast"}, "'thinking' must be a dictionary"),
        ({"retry": {"max_attempts": 0}}, "max_attempts"),
        ({"retry": {"initial_delay": -1}}, "initial_delay"),
        ({"budget": {"limit": 0}}, "budget.limit"),
        ({"budget": {"max_cost_per_call": -2}}, "max_cost_per_call"),
        ({"budget": {"action_on_breach": "block"}}, "must set"),
        ({"budget": {"limit": 1, "action_on_breach": "explode"}}, "action_on_breach"),
        ({"ledger": {"path": "x.db"}}, "Unknown keys in ledger"),
        ({"memory_dir": 5}, "memory_dir"),
    ])
    def test_invalid_values_rejected(self, config_data, match):
        with pytest.raises(ValueError, match=match):
            load_agent_config(self._write_config(config_data))
