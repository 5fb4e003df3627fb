"""
Language faculty.

Routes requests through the gateway using the brain's current cognitive
configuration.
"""

import logging
from typing import Any, List, Optional, Protocol

from ..core import semantify
from ..core.semantics import AbstractSemanticState, SemanticMetadata
from ..core.thinking import GenAIState
from ..sdk.gateway import CallOutcome, LanguageGateway

logger = logging.getLogger(__name__)


class LanguageFaculty(Protocol):
    """Language capability used by the other faculties."""

    state: GenAIState

    async def process(self, contents: Any, model_override: Optional[str] = None) -> CallOutcome:
        ...


class Language:
    """Translates intent into gateway calls.

    The GenAIState is shared with the brain and read at call time, so
    changes between calls take effect on the next call.
    """

    def __init__(self, gateway: LanguageGateway, state: GenAIState):
        self.gateway = gateway
        self.state = state

    async def process(self, contents: Any, model_override: Optional[str] = None) -> CallOutcome:
        return await self.gateway.process(contents, self.state, model_override)

    async def detailed_description(
        self,
        abstract: AbstractSemanticState,
        metadata: Optional[SemanticMetadata] = None,
    ) -> str:
        """Ask the model for a detailed description of an abstract state.

        Returns "" when the model generates no text.
        """
        outcome = await self.process(semantify.abstract_state(abstract, metadata))
        if not outcome.text:
            logger.error("No text generated from the model.")
            return ""
        return outcome.text

    async def semantic_embedding(self, contents: List[str]) -> Any:
        return await self.gateway.embed(contents)
