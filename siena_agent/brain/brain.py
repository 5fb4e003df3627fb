"""
The Brain: central state plus the faculties that act on it.
"""

from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

from ..core.semantics import Plan, SemanticGoal, SemanticMetaGoal, initial_plan
from ..core.thinking import GenAIState
from ..sdk.gateway import LanguageGateway
from ..storage.memory import MemoryStore
from .language import Language
from .thought import Thought


@dataclass
class BrainState:
    """Cognitive configuration plus the actor's goals and plan."""
    genai: GenAIState
    metagoal: SemanticMetaGoal
    current_plan: Plan
    current_goals: List[SemanticGoal] = field(default_factory=list)


class Faculties(NamedTuple):
    language: Language
    thought: Thought
    memory: MemoryStore


class Brain:
    """Coordinates the language, thought and memory faculties.

    Faculties are injected; the gateway is only needed when no language
    faculty is given.
    """

    def __init__(
        self,
        genai_state: GenAIState,
        metagoal: SemanticMetaGoal,
        gateway: Optional[LanguageGateway] = None,
        language: Optional[Language] = None,
        memory: Optional[MemoryStore] = None,
    ):
        if language is None and gateway is None:
            raise ValueError("Brain requires a gateway or a language faculty")

        self._language = language or Language(gateway, genai_state)
        # an injected language faculty brings its own state
        genai_state = self._language.state
        self.state = BrainState(
            genai=genai_state,
            metagoal=metagoal,
            current_plan=initial_plan(metagoal),
        )
        self._thought = Thought(self._language, genai_state)
        self._memory = memory or MemoryStore()

    @property
    def metagoal(self) -> SemanticMetaGoal:
        return self.state.metagoal

    @property
    def goals(self) -> List[SemanticGoal]:
        return self.state.current_goals

    @property
    def plan(self) -> Plan:
        return self.state.current_plan

    def faculties(self) -> Faculties:
        return Faculties(
            language=self._language,
            thought=self._thought,
            memory=self._memory,
        )
