"""
Unit tests for the Agent facade and registry.
"""

import json
import os
import tempfile
from dataclasses import replace
from types import SimpleNamespace

import pytest

from siena_agent.agent import Agent, AgentRegistry
from siena_agent.config.loader import default_agent_config
from siena_agent.core.budget import BudgetConfig
from siena_agent.core.records import Narrative, Topic
from siena_agent.core.semantics import AbstractSemanticState, SemanticMetadata, SemanticMetaGoal
from siena_agent.core.thinking import ThinkingShape, ThoughtSpeed
from siena_agent.sdk.gateway import RetryPolicy
from siena_agent.storage.repository import UsageRepository


class TextClient:
    """Answers each generate call with the next scripted text."""

    def __init__(self, texts):
        self.texts = list(texts)
        self.calls = []

    async def generate_content(self, contents, model, config):
        self.calls.append({"contents": contents, "model": model, "config": dict(config)})
        return SimpleNamespace(
            text=self.texts.pop(0),
            usage_metadata=SimpleNamespace(
                prompt_token_count=100,
                candidates_token_count=10,
                cached_content_token_count=0,
            ),
        )

    async def embed_content(self, contents, model):
        return []


METAGOAL = SemanticMetaGoal(
    detailed="Write a screenplay about the sea",
    abstract=AbstractSemanticState(what="a screenplay"),
)


class TestAgentRegistry:

    def test_register_and_get(self):
        registry = AgentRegistry()
        agent = Agent.new("writer", METAGOAL, client=TextClient([]), registry=registry)

        assert len(registry) == 1
        assert registry.get("writer") is agent
        assert registry.names() == ["writer"]
        assert list(registry) == [agent]
        assert registry.get("missing") is None

    def test_agents_without_registry_are_untracked(self):
        registry = AgentRegistry()
        Agent.new("loner", METAGOAL, client=TextClient([]))
        assert len(registry) == 0


class TestAgent:
    """Test Agent construction and delegation."""

    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.config = replace(
            default_agent_config(),
            memory_dir=os.path.join(self.temp_dir, "memory"),
            retry=RetryPolicy(max_attempts=2, initial_delay=0),
        )

    def teardown_method(self):
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_new_builds_independent_state(self):
        first = Agent.new("a", METAGOAL, config=self.config, client=TextClient([]))
        second = Agent.new("b", METAGOAL, config=self.config, client=TextClient([]))

        first.brain.state.genai.system_instruction = "changed"

        assert second.brain.state.genai.system_instruction == self.config.initial_instruction
        assert first.brain.state.genai is not second.brain.state.genai

    def test_constructor_goals(self):
        agent = Agent.new("a", METAGOAL, client=TextClient([]))
        goal_agent = Agent("b", agent.brain, METAGOAL, goals=[])
        assert goal_agent.goals == []
        assert goal_agent.config == default_agent_config()

    @pytest.mark.asyncio
    async def test_new_goal(self):
        client = TextClient(["A storm-driven voyage across the Atlantic."])
        agent = Agent.new("writer", METAGOAL, config=self.config, client=client)
        metadata = SemanticMetadata(title="Act I", semantic_tags=["sea"], timestamp=99)

        goal = await agent.new_goal(AbstractSemanticState(what="a voyage"), metadata)

        assert goal.detailed == "A storm-driven voyage across the Atlantic."
        assert goal.title == "Act I"
        assert goal.salience == 0.0
        assert goal.timestamp == 99
        assert goal.semantic_tags == ["sea"]
        assert client.calls[0]["model"] == ThoughtSpeed.FASTER.value
        assert client.calls[0]["config"]["system_instruction"] == self.config.initial_instruction

    @pytest.mark.asyncio
    async def test_grow_and_save(self):
        agent = Agent.new("writer", METAGOAL, config=self.config, client=TextClient(["Waves rose."]))
        seed = Narrative(title="Sea Story", narrative="Calm water.", timestamp=1)

        grown = await agent.grow_narrative(seed)
        path = agent.save(grown)

        assert grown.narrative == "Waves rose."
        with open(path, "r", encoding="utf-8") as f:
            assert json.load(f)["narrative"] == "Waves rose."
        assert path.parent.name == "narrative"

    @pytest.mark.asyncio
    async def test_formulate_hypothesis_and_save(self):
        response = json.dumps({"title": "Sea Theory", "thesis": "Water moves"})
        agent = Agent.new("writer", METAGOAL, config=self.config, client=TextClient([response]))

        hypothesis = await agent.formulate_hypothesis(Narrative(title="Sea", narrative="Waves."))
        path = agent.save(hypothesis)

        assert hypothesis.thesis == "Water moves"
        assert path.parent.name == "hypothesis"

    def test_save_with_explicit_kind(self):
        agent = Agent.new("writer", METAGOAL, config=self.config, client=TextClient([]))
        path = agent.save(Topic(title="Tides", timestamp=3), "topic")
        assert path.name == "tides_3.json"

    def test_save_rejects_unknown_record(self):
        agent = Agent.new("writer", METAGOAL, config=self.config, client=TextClient([]))
        with pytest.raises(ValueError, match="Cannot infer record kind"):
            agent.save({"title": "dict"})

    @pytest.mark.asyncio
    async def test_ledger_and_budget_wired_from_config(self):
        db_path = os.path.join(self.temp_dir, "usage.db")
        config = replace(
            self.config,
            shape=ThinkingShape(speed=ThoughtSpeed.FASTER),
            ledger_path=db_path,
            budget=BudgetConfig(budget_limit=100.0),
        )
        agent = Agent.new("ledgered", METAGOAL, config=config, client=TextClient(["x"]))

        await agent.grow_narrative(Narrative(title="t", narrative="n"))

        events = UsageRepository(db_path).get_recent_events(agent="ledgered")
        assert len(events) == 1
        assert events[0].model == "gemini-2.5-flash"
        assert agent.brain.faculties().language.gateway.budget.spent > 0
