"""
Unit tests for prompt synthesis.
"""

from siena_agent.core import semantify
from siena_agent.core.records import Narrative
from siena_agent.core.semantics import (
    AbstractSemanticState,
    SemanticContext,
    SemanticGoal,
    SemanticMetadata,
    SemanticMetaGoal,
    initial_plan,
    new_abstract_state,
    new_contexted_data,
)


def make_metagoal():
    return SemanticMetaGoal(
        detailed="Write a screenplay",
        abstract=new_abstract_state("a film", "a studio", "to entertain", "by writing"),
    )


class TestAbstractState:

    def test_contains_four_questions(self):
        prompt = semantify.abstract_state(AbstractSemanticState("w1", "w2", "w3", "h4"))
        assert prompt.startswith(semantify.ABSTRACT_STATE_INSTRUCTION)
        assert "What: w1\nWhere: w2\nWhy: w3\nHow: h4" in prompt
        assert prompt.endswith("Please return the detailed semantic description.")
        assert "RAW DATA" not in prompt

    def test_includes_metadata_block(self):
        metadata = SemanticMetadata(
            title="Opening",
            semantic_data={"scene": 1},
            semantic_tags=["intro", "night"],
            timestamp=42,
        )
        prompt = semantify.abstract_state(AbstractSemanticState(what="x"), metadata)
        assert "Title: Opening" in prompt
        assert "Timestamp: 42" in prompt
        assert "semantic tags: intro, night" in prompt
        assert 'RAW DATA: ```{"scene": 1}```' in prompt


class TestMetadata:

    def test_missing_description_uses_default(self):
        prompt = semantify.metadata(SemanticMetadata(title="T", semantic_data="raw"))
        assert "Description: No description provided." in prompt
        assert '"str"' in prompt

    def test_description_rendered(self):
        prompt = semantify.metadata(SemanticMetadata(title="T", description="About T"))
        assert "Description: About T" in prompt


class TestGoal:

    def test_none_goal(self):
        assert semantify.goal(None) == semantify.NO_DESCRIPTION

    def test_metagoal(self):
        rendered = semantify.goal(make_metagoal())
        assert rendered.startswith("Write a screenplay (What: a film")

    def test_titled_goal_with_empty_detail(self):
        goal = SemanticGoal(title="Act I", detailed="", abstract=AbstractSemanticState())
        rendered = semantify.goal(goal)
        assert rendered == "Act I: No description provided. (What: , Where: , Why: , How: )"


class TestContexted:

    def test_context_precedes_data(self):
        metagoal = make_metagoal()
        goal = SemanticGoal(title="Act I", detailed="Set up the hero", abstract=AbstractSemanticState())
        context = SemanticContext(semantic_representation="scene", metagoal=metagoal, goals=[goal])
        data = new_contexted_data("Scene 1", "INT. HOUSE", ["scene"], context)

        prompt = semantify.contexted(data)

        assert prompt.startswith("Context: You are currently processing the above data.")
        assert "Act I: Set up the hero" in prompt
        assert "Under the unified narrative of the metagoal: Write a screenplay" in prompt
        assert prompt.index("Context:") < prompt.index("Data:")
        assert "Title: Scene 1" in prompt

    def test_no_goals(self):
        plan = initial_plan(make_metagoal())
        prompt = semantify.contexted(plan.data)
        assert "following goals: none." in prompt


class TestNarrative:

    def test_narrative_block(self):
        narrative = Narrative(title="Dawn", synopsis="Sunrise", narrative="Light spread.", tags=["a", "b"])
        assert semantify.narrative(narrative) == (
            "Title: Dawn\nSynopsis: Sunrise\nTags: a, b\nNarrative: Light spread."
        )
