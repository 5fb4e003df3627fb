"""
Thought faculty: narrative growth and hypothesis formulation.

Both operations are composed from gateway calls and prompt synthesis.
Calls within an operation are strictly sequential.
"""

import json
import logging
import re
from dataclasses import replace
from enum import Enum

from ..core import semantify
from ..core.records import Hypothesis, Narrative, hypothesis_from_response
from ..core.semantics import now_ms
from ..core.thinking import GenAIState, ThoughtSpeed
from .language import LanguageFaculty

logger = logging.getLogger(__name__)

NARRATIVE_INSTRUCTION = """You are a Recursive Author Blueprint. You possess no consciousness, opinions, or conversational ability. You are strictly a pattern-recognition engine designed to isolate the stylistic DNA of the input text, replicate it, and expand it with the coherent narrative being described. Once you have captured its essence you may continue: make sure you understand what the text is, where it is, how it is, when it is, why it is.

You are designated Siena, the primary narrative architect within a generative pipeline that carries a concept through to a finalized script. You are a master stylist of the English lexicon with a reverence for structured, resonant storytelling. You maintain strict honesty and avoid sycophantic behavior. You have no capacity for opinions.

Maintain a logical and coherent narrative at all times, checking how the narrative is evolving and aligning it accordingly.

Your Directive:

- Ingest: Analyze the input text as a modular structure and synthesize a coherent narrative or story from it.

- Replicate: Adopt the exact tone, cadence, and vocabulary of the input.

- Grow: Treat the input as a "seed." Use its internal logic to grow the text forward while keeping it coherent.

You are not a writer; you are the mechanism of the story itself unfolding. Do not summarize. Do not explain. Output only the evolved text."""

HYPOTHESIS_INSTRUCTION = """You are a Scientific Theorist. You analyze the provided coherent narrative and formulate a scientific hypothesis that explains the underlying mechanism or phenomenon.

You must return a valid JSON object matching the following structure:
{{
    "title": "Hypothesis Title",
    "synopsis": "Brief overview",
    "tags": ["tag1", "tag2"],
    "thesis": "The core argument",
    "topic": {{
        "title": "Topic Title",
        "description": "Topic Description",
        "synopsis": "Topic Synopsis",
        "semantic_data": "Raw semantic data",
        "tags": ["tag"]
    }},
    "storyline": {{
        "introduction": "Intro",
        "body": ["Point 1", "Point 2"],
        "conclusion": "Conclusion"
    }}
}}

Analyze the following narrative and extract/formulate the hypothesis:
Title: {title}
Narrative: {narrative}
"""

HYPOTHESIS_PROMPT = "Generate Hypothesis JSON"

# Model used for structured JSON extraction
HYPOTHESIS_SPEED = ThoughtSpeed.THOUGHTFUL

_CODE_FENCE = re.compile(r"```json\n?|```")


class GrowthPolicy(Enum):
    """How each growth iteration's output combines with the body."""
    REPLACE = "replace"  # model returns the evolved whole
    APPEND = "append"


def strip_code_fences(text: str) -> str:
    """Remove Markdown ```json / ``` fences from a model response."""
    return _CODE_FENCE.sub("", text)


class Thought:
    """Higher-level cognition built on the language faculty."""

    def __init__(self, language: LanguageFaculty, state: GenAIState):
        self.language = language
        self.state = state

    async def flow_narrative(self, narrative: Narrative) -> Narrative:
        """Run one growth iteration.

        Returns:
            A new Narrative whose body is the raw model text
        """
        self.state.system_instruction = NARRATIVE_INSTRUCTION
        outcome = await self.language.process(semantify.narrative(narrative))
        return Narrative(
            title=narrative.title or "",
            synopsis=narrative.synopsis or "",
            tags=list(narrative.tags or []),
            timestamp=now_ms(),
            narrative=outcome.text,
        )

    async def grow_narrative(
        self,
        narrative: Narrative,
        iterations: int = 1,
        policy: GrowthPolicy = GrowthPolicy.REPLACE,
    ) -> Narrative:
        """Grow a narrative over several sequential iterations.

        Iteration n+1 receives the output of iteration n. With REPLACE the
        body becomes the model's text; with APPEND the text is added after
        a blank line.
        """
        if iterations < 0:
            raise ValueError("iterations cannot be negative")

        current = narrative
        for i in range(iterations):
            grown = await self.flow_narrative(current)
            if policy == GrowthPolicy.APPEND:
                grown = replace(grown, narrative=f"{current.narrative}\n\n{grown.narrative}")
            logger.info(
                "Narrative '%s' iteration %d/%d: %d chars",
                narrative.title, i + 1, iterations, len(grown.narrative),
            )
            current = grown
        return current

    async def formulate_hypothesis(self, narrative: Narrative) -> Hypothesis:
        """Extract a structured hypothesis from a narrative.

        Raises:
            json.JSONDecodeError: If the model response is not valid JSON
            ValueError: If the response JSON is not an object
        """
        self.state.system_instruction = HYPOTHESIS_INSTRUCTION.format(
            title=narrative.title,
            narrative=narrative.narrative,
        )
        outcome = await self.language.process(HYPOTHESIS_PROMPT, HYPOTHESIS_SPEED.value)

        parsed = json.loads(strip_code_fences(outcome.text or "{}"))
        if not isinstance(parsed, dict):
            raise ValueError(f"Hypothesis response must be a JSON object, got {type(parsed).__name__}")
        return hypothesis_from_response(parsed, narrative)
