"""
Prompt synthesis.

Renders typed semantic data into prompt text. Every function is total:
optional fields fall back to literal strings so synthesis never fails on
partially populated records.
"""

import json
from typing import Any, Iterable, Optional, Union

from .records import Narrative
from .semantics import (
    AbstractSemanticState,
    ContextedSemanticData,
    SemanticGoal,
    SemanticMetadata,
    SemanticMetaGoal,
)

NO_DESCRIPTION = "No description provided."

ABSTRACT_STATE_INSTRUCTION = (
    "Please review the relevant metadata and the what, where, why, and how of "
    "the following abstract semantic state and return a detailed semantic "
    "description of the what, where, why, and how."
)


def _tags(tags: Optional[Iterable[str]]) -> str:
    return ", ".join(str(tag) for tag in tags or [])


def _raw(data: Any) -> str:
    return json.dumps(data, default=str)


def _data_block(
    title: str,
    description: Optional[str],
    timestamp: Any,
    tags: Optional[Iterable[str]],
    data: Any,
) -> str:
    return (
        f'This is contexted semantic data of the type "{type(data).__name__}" '
        f"with the following properties:\n"
        f"Title: {title}\n"
        f"Description: {description or NO_DESCRIPTION}\n"
        f"Timestamp: {timestamp}\n\n"
        f"The data has the following semantic tags: {_tags(tags)}\n\n"
        f"RAW DATA: ```{_raw(data)}```\n"
    )


def abstract_state(
    abstract: AbstractSemanticState,
    metadata: Optional[SemanticMetadata] = None,
) -> str:
    """Prompt asking for a detailed description of an abstract state."""
    metadata_template = _metadata_block(metadata) if metadata else ""
    abstract_template = (
        f"\n\nWhat: {abstract.what}\nWhere: {abstract.where}\n"
        f"Why: {abstract.why}\nHow: {abstract.how}\n\n"
    )
    return (
        ABSTRACT_STATE_INSTRUCTION
        + metadata_template
        + abstract_template
        + "Please return the detailed semantic description."
    )


def _metadata_block(data: SemanticMetadata) -> str:
    return _data_block(
        title=data.title,
        description=data.description,
        timestamp=data.timestamp,
        tags=data.semantic_tags,
        data=data.semantic_data,
    )


def metadata(data: SemanticMetadata) -> str:
    """Render a metadata envelope."""
    return _metadata_block(data)


def goal(data: Union[SemanticGoal, SemanticMetaGoal, None]) -> str:
    """Render a goal or meta-goal as a single paragraph."""
    if data is None:
        return NO_DESCRIPTION
    abstract = data.abstract or AbstractSemanticState()
    title = getattr(data, "title", None)
    prefix = f"{title}: " if title else ""
    return f"{prefix}{data.detailed or NO_DESCRIPTION} ({abstract})"


def contexted(data: ContextedSemanticData) -> str:
    """Render data framed by the active goals and the meta-goal.

    The framing sentence comes first so sub-task prompts stay anchored to
    the top-level objective.
    """
    context = data.context
    goals = "; ".join(goal(g) for g in context.goals) or "none"
    context_template = (
        f"You are currently processing the above data. "
        f"You are trying to achieve the following goals: {goals}. "
        f"Under the unified narrative of the metagoal: {goal(context.metagoal)}."
    )
    data_template = _data_block(
        title=data.title,
        description=data.description,
        timestamp=data.timestamp,
        tags=data.semantic_tags,
        data=data.semantic_data,
    )
    return f"Context: {context_template}\nData: {data_template}\n"


def narrative(data: Narrative) -> str:
    """Title/Synopsis/Tags/Narrative block used for narrative growth."""
    return (
        f"Title: {data.title}\n"
        f"Synopsis: {data.synopsis}\n"
        f"Tags: {_tags(data.tags)}\n"
        f"Narrative: {data.narrative}"
    )
