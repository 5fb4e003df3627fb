"""
Semantic data model.

Typed goal, metadata and context objects that shape prompt text.
"""

import time
from dataclasses import dataclass, field
from typing import Any, List, Optional


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class AbstractSemanticState:
    """The four questions grounding a thought: what, where, why, how."""
    what: str = ""
    where: str = ""
    why: str = ""
    how: str = ""

    def __str__(self) -> str:
        return f"What: {self.what}, Where: {self.where}, Why: {self.why}, How: {self.how}"


@dataclass(frozen=True)
class SemanticMetadata:
    """Envelope describing a piece of semantic data."""
    title: str
    semantic_data: Any = ""
    semantic_tags: List[str] = field(default_factory=list)
    timestamp: int = field(default_factory=now_ms)
    description: Optional[str] = None


@dataclass
class SemanticMetaGoal:
    """Top-level objective every sub-task prompt is anchored to."""
    detailed: str
    abstract: AbstractSemanticState


@dataclass
class SemanticGoal:
    """Concrete goal derived from an abstract state."""
    title: str
    detailed: str
    abstract: AbstractSemanticState
    semantic_data: Any = ""
    semantic_tags: List[str] = field(default_factory=list)
    timestamp: int = field(default_factory=now_ms)
    description: Optional[str] = None
    salience: float = 0.0  # 0.0 to 1.0


@dataclass
class SemanticContext:
    """Context a piece of data is processed under."""
    semantic_representation: str
    metagoal: SemanticMetaGoal
    goals: List[SemanticGoal] = field(default_factory=list)


@dataclass
class ContextedSemanticData:
    """Data placed within a goal context."""
    title: str
    semantic_data: Any
    semantic_tags: List[str]
    context: SemanticContext
    timestamp: int = field(default_factory=now_ms)
    description: Optional[str] = None


@dataclass
class Plan:
    """Concrete plan of action for the brain."""
    data: ContextedSemanticData
    action: str
    salience: float = 0.0


def new_abstract_state(what: str, where: str, why: str, how: str) -> AbstractSemanticState:
    return AbstractSemanticState(what=what, where=where, why=why, how=how)


def new_contexted_data(
    title: str,
    semantic_data: Any,
    semantic_tags: List[str],
    context: SemanticContext,
) -> ContextedSemanticData:
    """Build contexted data stamped with the current time."""
    return ContextedSemanticData(
        title=title,
        semantic_data=semantic_data,
        semantic_tags=list(semantic_tags),
        context=context,
        timestamp=now_ms(),
    )


def initial_plan(metagoal: SemanticMetaGoal) -> Plan:
    """Placeholder plan that bootstraps an actor before any processing."""
    data = new_contexted_data(
        title="Initial Plan",
        semantic_data="",
        semantic_tags=[],
        context=SemanticContext(
            semantic_representation="Initial Plan",
            metagoal=metagoal,
            goals=[],
        ),
    )
    return Plan(data=data, action="Template placeholder", salience=0.0)
