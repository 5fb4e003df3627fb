"""
Brain and faculties for Siena Agent.

Language routes calls through the gateway, Thought grows narratives and
formulates hypotheses, and the Brain composes them over shared state.
"""

from .brain import Brain, BrainState, Faculties
from .language import Language
from .thought import GrowthPolicy, Thought

__all__ = ["Brain", "BrainState", "Faculties", "GrowthPolicy", "Language", "Thought"]
