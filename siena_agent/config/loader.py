"""
Configuration management and loading.

Agent configuration objects and their YAML loader. Configuration is
passed explicitly at construction time; there is no global default state.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from siena_agent.core.budget import BreachAction, BudgetConfig
from siena_agent.core.thinking import (
    ThinkingLevel,
    ThinkingShape,
    ThoughtClarity,
    ThoughtSpeed,
)
from siena_agent.sdk.gateway import RetryPolicy
from siena_agent.storage.memory import DEFAULT_MEMORY_DIR

DEFAULT_ROOT_INSTRUCTION = (
    "You are a work-in-progress agent within the Screenwriter Agentic project. "
    "You are a stateless, memoryless agent."
)


@dataclass(frozen=True)
class AgentConfig:
    """Complete agent configuration."""
    shape: ThinkingShape = field(default_factory=lambda: ThinkingShape(
        speed=ThoughtSpeed.FASTER,
        clarity=ThoughtClarity.INTUITIVE,
    ))
    system_instruction: str = ""
    root_instruction: str = DEFAULT_ROOT_INSTRUCTION
    memory_dir: str = DEFAULT_MEMORY_DIR
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    budget: Optional[BudgetConfig] = None
    ledger_path: Optional[str] = None

    @property
    def initial_instruction(self) -> str:
        """System instruction a new agent starts with."""
        return self.system_instruction or self.root_instruction


DEFAULT_AGENT_CONFIG = AgentConfig()


def default_agent_config() -> AgentConfig:
    """Fresh default configuration: FASTER speed, INTUITIVE clarity."""
    return AgentConfig()


def parse_speed(value: Any, path: str = "thinking.speed") -> ThoughtSpeed:
    """Accept a model identifier or a speed name (case-insensitive)."""
    if isinstance(value, ThoughtSpeed):
        return value
    if not isinstance(value, str):
        raise ValueError(f"'{path}' must be a string")
    for speed in ThoughtSpeed:
        if value == speed.value or value.upper() == speed.name:
            return speed
    valid = [s.name for s in ThoughtSpeed] + [s.value for s in ThoughtSpeed]
    raise ValueError(f"'{path}' must be one of: {valid}")


def parse_clarity(value: Any, path: str = "thinking.clarity") -> Union[ThoughtClarity, ThinkingLevel]:
    """Accept a clarity name or a raw thinking level name."""
    if isinstance(value, (ThoughtClarity, ThinkingLevel)):
        return value
    if not isinstance(value, str):
        raise ValueError(f"'{path}' must be a string")
    name = value.upper()
    if name in ThoughtClarity.__members__:
        return ThoughtClarity[name]
    if name in ThinkingLevel.__members__:
        return ThinkingLevel[name]
    valid = list(ThoughtClarity.__members__) + list(ThinkingLevel.__members__)
    raise ValueError(f"'{path}' must be one of: {valid}")


def _check_keys(data: Dict, allowed: set, path: str) -> None:
    unknown_keys = set(data.keys()) - allowed
    if unknown_keys:
        raise ValueError(f"Unknown keys in {path}: {unknown_keys}")


def _section(raw_config: Dict, key: str) -> Dict:
    data = raw_config.get(key, {})
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"'{key}' must be a dictionary")
    return data


def _positive_number(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"'{path}' must be > 0")
    return float(value)


def _string(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"'{path}' must be a string")
    return value


def load_agent_config(path: str) -> AgentConfig:
    """Load and validate agent configuration from a YAML file.

    Missing sections take the defaults of AgentConfig; unknown keys and
    invalid values are rejected.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated AgentConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Agent config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")

    _check_keys(raw_config, {
        'thinking', 'system_instruction', 'root_instruction',
        'memory_dir', 'retry', 'budget', 'ledger',
    }, "configuration")

    defaults = DEFAULT_AGENT_CONFIG

    thinking = _section(raw_config, 'thinking')
    _check_keys(thinking, {'speed', 'clarity', 'include_thoughts'}, "thinking")
    include_thoughts = thinking.get('include_thoughts', defaults.shape.include_thoughts)
    if not isinstance(include_thoughts, bool):
        raise ValueError("'thinking.include_thoughts' must be a boolean")
    shape = ThinkingShape(
        speed=parse_speed(thinking['speed']) if 'speed' in thinking else defaults.shape.speed,
        clarity=parse_clarity(thinking['clarity']) if 'clarity' in thinking else defaults.shape.clarity,
        include_thoughts=include_thoughts,
    )

    retry_data = _section(raw_config, 'retry')
    _check_keys(retry_data, {'max_attempts', 'initial_delay'}, "retry")
    max_attempts = retry_data.get('max_attempts', defaults.retry.max_attempts)
    if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
        raise ValueError("'retry.max_attempts' must be an integer >= 1")
    initial_delay = retry_data.get('initial_delay', defaults.retry.initial_delay)
    if isinstance(initial_delay, bool) or not isinstance(initial_delay, (int, float)) or initial_delay < 0:
        raise ValueError("'retry.initial_delay' must be >= 0")
    retry = RetryPolicy(max_attempts=max_attempts, initial_delay=float(initial_delay))

    budget = None
    if raw_config.get('budget') is not None:
        budget = _parse_budget(_section(raw_config, 'budget'))

    ledger_path = None
    ledger_data = _section(raw_config, 'ledger')
    _check_keys(ledger_data, {'db_path'}, "ledger")
    if 'db_path' in ledger_data:
        ledger_path = _string(ledger_data['db_path'], "ledger.db_path")

    return AgentConfig(
        shape=shape,
        system_instruction=_string(
            raw_config.get('system_instruction', defaults.system_instruction), "system_instruction"),
        root_instruction=_string(
            raw_config.get('root_instruction', defaults.root_instruction), "root_instruction"),
        memory_dir=_string(raw_config.get('memory_dir', defaults.memory_dir), "memory_dir"),
        retry=retry,
        budget=budget,
        ledger_path=ledger_path,
    )


def _parse_budget(data: Dict) -> BudgetConfig:
    """Parse and validate the budget section.

    Raises:
        ValueError: If configuration is invalid
    """
    _check_keys(data, {'max_cost_per_call', 'limit', 'action_on_breach'}, "budget")

    max_cost = None
    if 'max_cost_per_call' in data:
        max_cost = _positive_number(data['max_cost_per_call'], "budget.max_cost_per_call")
    limit = None
    if 'limit' in data:
        limit = _positive_number(data['limit'], "budget.limit")
    if max_cost is None and limit is None:
        raise ValueError("'budget' must set 'max_cost_per_call' or 'limit'")

    action_str = data.get('action_on_breach', BreachAction.BLOCK.value)
    if not isinstance(action_str, str):
        raise ValueError("'budget.action_on_breach' must be a string")
    try:
        action = BreachAction(action_str.lower())
    except ValueError:
        valid_actions = [action.value for action in BreachAction]
        raise ValueError(f"'budget.action_on_breach' must be one of: {valid_actions}")

    return BudgetConfig(max_cost_per_call=max_cost, budget_limit=limit, on_breach=action)
