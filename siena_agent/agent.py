"""
Agent facade.

A named wrapper around a Brain. Agents are built from an explicit
AgentConfig and are tracked only by a registry the caller passes in.
"""

import logging
from typing import Dict, Iterator, List, Optional

from .brain import Brain, GrowthPolicy
from .config.loader import AgentConfig, default_agent_config
from .core.budget import BudgetGuard
from .core.records import Hypothesis, Narrative, Topic
from .core.semantics import (
    AbstractSemanticState,
    SemanticGoal,
    SemanticMetadata,
    SemanticMetaGoal,
)
from .core.thinking import GenAIState
from .sdk.gateway import LanguageClient, LanguageGateway
from .sdk.gemini_client import GeminiClient
from .storage.memory import MemoryStore
from .storage.repository import UsageLedger

logger = logging.getLogger(__name__)


class AgentRegistry:
    """Tracks agents by name."""

    def __init__(self):
        self._agents: Dict[str, "Agent"] = {}

    def register(self, agent: "Agent") -> None:
        if agent.name in self._agents:
            logger.warning("Replacing registered agent '%s'", agent.name)
        self._agents[agent.name] = agent

    def get(self, name: str) -> Optional["Agent"]:
        return self._agents.get(name)

    def names(self) -> List[str]:
        return list(self._agents)

    def __len__(self) -> int:
        return len(self._agents)

    def __iter__(self) -> Iterator["Agent"]:
        return iter(self._agents.values())


class Agent:
    """An autonomous writer built around a Brain.

    Use Agent.new() to build the brain and its collaborators from an
    AgentConfig; the constructor takes an already composed brain.
    """

    def __init__(
        self,
        name: str,
        brain: Brain,
        metagoal: SemanticMetaGoal,
        goals: Optional[List[SemanticGoal]] = None,
        config: Optional[AgentConfig] = None,
    ):
        self.name = name
        self.brain = brain
        self.metagoal = metagoal
        self.config = config or default_agent_config()
        if goals:
            self.brain.state.current_goals.extend(goals)

    @property
    def goals(self) -> List[SemanticGoal]:
        return self.brain.goals

    @classmethod
    def new(
        cls,
        name: str,
        metagoal: SemanticMetaGoal,
        config: Optional[AgentConfig] = None,
        client: Optional[LanguageClient] = None,
        registry: Optional[AgentRegistry] = None,
    ) -> "Agent":
        """Build an agent with a fresh brain.

        Args:
            name: Agent name, also recorded in the usage ledger
            metagoal: The unifying goal of everything the agent does
            config: Agent configuration, defaults to default_agent_config()
            client: Generate/embed client, defaults to a GeminiClient
            registry: Registry to add the agent to, if any

        Returns:
            The new Agent
        """
        config = config or default_agent_config()
        state = GenAIState(shape=config.shape, system_instruction=config.initial_instruction)

        ledger = UsageLedger(config.ledger_path, agent=name) if config.ledger_path else None
        budget = BudgetGuard(config.budget) if config.budget else None
        gateway = LanguageGateway(
            client or GeminiClient(),
            retry_policy=config.retry,
            usage_recorder=ledger,
            budget=budget,
        )
        brain = Brain(state, metagoal, gateway=gateway, memory=MemoryStore(config.memory_dir))

        agent = cls(name, brain, metagoal, config=config)
        if registry is not None:
            registry.register(agent)
        logger.debug("Created agent '%s' (speed=%s)", name, config.shape.speed.value)
        return agent

    async def new_goal(
        self,
        abstract: AbstractSemanticState,
        metadata: SemanticMetadata,
    ) -> SemanticGoal:
        """Turn an abstract intent into a concrete goal with a generated description."""
        detailed = await self.brain.faculties().language.detailed_description(abstract, metadata)
        return SemanticGoal(
            title=metadata.title,
            detailed=detailed,
            abstract=abstract,
            semantic_data=metadata.semantic_data,
            semantic_tags=list(metadata.semantic_tags),
            timestamp=metadata.timestamp,
            description=metadata.description,
            salience=0.0,
        )

    async def grow_narrative(
        self,
        narrative: Narrative,
        iterations: int = 1,
        policy: GrowthPolicy = GrowthPolicy.REPLACE,
    ) -> Narrative:
        return await self.brain.faculties().thought.grow_narrative(narrative, iterations, policy)

    async def formulate_hypothesis(self, narrative: Narrative) -> Hypothesis:
        return await self.brain.faculties().thought.formulate_hypothesis(narrative)

    def save(self, record, kind: Optional[str] = None):
        """Persist a record; the kind is inferred from its type when omitted."""
        memory = self.brain.faculties().memory
        if kind is not None:
            return memory.save(record, kind)
        if isinstance(record, Narrative):
            return memory.save_narrative(record)
        if isinstance(record, Hypothesis):
            return memory.save_hypothesis(record)
        if isinstance(record, Topic):
            return memory.save_topic(record)
        raise ValueError(f"Cannot infer record kind for {type(record).__name__}")
