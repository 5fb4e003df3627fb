"""
Persistable records: narratives, topics, storylines and hypotheses.

Every record has a total constructor: missing fields take the defaults
enumerated in from_dict, never an implicit None.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .semantics import now_ms

RECORD_KINDS = ("narrative", "hypothesis", "topic")

UNTITLED_HYPOTHESIS = "Untitled Hypothesis"
UNKNOWN_TOPIC = "Unknown Topic"


def _as_str(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return value if isinstance(value, str) else str(value)


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _as_str_list(value: Any) -> List[str]:
    return [_as_str(v) for v in _as_list(value)]


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_timestamp(value: Any) -> int:
    return int(value) if isinstance(value, (int, float)) else now_ms()


@dataclass(frozen=True)
class ReviewResult:
    """A model's review of a record."""
    model_name: str
    review: str
    rating: float
    timestamp: int = field(default_factory=now_ms)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReviewResult":
        rating = data.get("rating")
        return cls(
            model_name=_as_str(data.get("model_name")),
            review=_as_str(data.get("review")),
            rating=float(rating) if isinstance(rating, (int, float)) else 0.0,
            timestamp=_as_timestamp(data.get("timestamp")),
        )


def _reviews(value: Any) -> List[ReviewResult]:
    return [ReviewResult.from_dict(r) for r in _as_list(value) if isinstance(r, dict)]


@dataclass
class Narrative:
    """Growable text record, the unit narrative growth operates on."""
    title: str
    synopsis: str = ""
    narrative: str = ""
    tags: List[str] = field(default_factory=list)
    timestamp: int = field(default_factory=now_ms)
    reviews: List[ReviewResult] = field(default_factory=list)
    evidence: List["Narrative"] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Narrative":
        """Build a narrative; absent fields default to "" / [] / now."""
        return cls(
            title=_as_str(data.get("title")),
            synopsis=_as_str(data.get("synopsis")),
            narrative=_as_str(data.get("narrative")),
            tags=_as_str_list(data.get("tags")),
            timestamp=_as_timestamp(data.get("timestamp")),
            reviews=_reviews(data.get("reviews")),
            evidence=[
                cls.from_dict(e) for e in _as_list(data.get("evidence"))
                if isinstance(e, dict)
            ],
        )


@dataclass
class Topic:
    """Subject of interest, a node of the knowledge graph."""
    title: str
    description: str = ""
    synopsis: str = ""
    semantic_data: str = ""
    tags: List[str] = field(default_factory=list)
    semantic_tags: List[str] = field(default_factory=list)
    timestamp: int = field(default_factory=now_ms)
    reviews: List[ReviewResult] = field(default_factory=list)
    evidence: List[Narrative] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Topic":
        """Build a topic; title defaults to "Unknown Topic".

        semantic_tags falls back to tags when absent.
        """
        tags = _as_str_list(data.get("tags"))
        semantic_tags = data.get("semantic_tags")
        return cls(
            title=_as_str(data.get("title"), UNKNOWN_TOPIC),
            description=_as_str(data.get("description")),
            synopsis=_as_str(data.get("synopsis")),
            semantic_data=_as_str(data.get("semantic_data")),
            tags=tags,
            semantic_tags=_as_str_list(semantic_tags) if semantic_tags is not None else list(tags),
            timestamp=_as_timestamp(data.get("timestamp")),
            reviews=_reviews(data.get("reviews")),
            evidence=[
                Narrative.from_dict(e) for e in _as_list(data.get("evidence"))
                if isinstance(e, dict)
            ],
        )


@dataclass
class Storyline:
    """Screenplay structure developed from a thesis."""
    title: str = ""
    synopsis: str = ""
    tags: List[str] = field(default_factory=list)
    introduction: str = ""
    body: List[str] = field(default_factory=list)
    conclusion: str = ""
    timestamp: int = field(default_factory=now_ms)
    reviews: List[ReviewResult] = field(default_factory=list)
    evidence: List[Narrative] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Storyline":
        return cls(
            title=_as_str(data.get("title")),
            synopsis=_as_str(data.get("synopsis")),
            tags=_as_str_list(data.get("tags")),
            introduction=_as_str(data.get("introduction")),
            body=_as_str_list(data.get("body")),
            conclusion=_as_str(data.get("conclusion")),
            timestamp=_as_timestamp(data.get("timestamp")),
            reviews=_reviews(data.get("reviews")),
            evidence=[
                Narrative.from_dict(e) for e in _as_list(data.get("evidence"))
                if isinstance(e, dict)
            ],
        )


@dataclass
class Hypothesis:
    """Structured {topic, thesis, storyline} derived from a narrative."""
    title: str
    topic: Topic
    thesis: str
    storyline: Storyline
    synopsis: str = ""
    tags: List[str] = field(default_factory=list)
    timestamp: int = field(default_factory=now_ms)
    reviews: List[ReviewResult] = field(default_factory=list)
    evidence: List[Narrative] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Hypothesis":
        """Build a hypothesis from a saved record or parsed model output.

        Defaults: title "Untitled Hypothesis", thesis "", topic and
        storyline built from empty dicts when absent.
        """
        return cls(
            title=_as_str(data.get("title"), UNTITLED_HYPOTHESIS),
            synopsis=_as_str(data.get("synopsis")),
            tags=_as_str_list(data.get("tags")),
            timestamp=_as_timestamp(data.get("timestamp")),
            topic=Topic.from_dict(_as_dict(data.get("topic"))),
            thesis=_as_str(data.get("thesis")),
            storyline=Storyline.from_dict(_as_dict(data.get("storyline"))),
            reviews=_reviews(data.get("reviews")),
            evidence=[
                Narrative.from_dict(e) for e in _as_list(data.get("evidence"))
                if isinstance(e, dict)
            ],
        )


def hypothesis_from_response(
    parsed: Dict[str, Any],
    narrative: Optional[Narrative] = None,
) -> Hypothesis:
    """Map a model's hypothesis JSON onto a Hypothesis.

    The storyline inherits the hypothesis title, synopsis and tags, the
    topic's semantic tags mirror its tags, and the source narrative is
    kept as evidence. All timestamps are set to now.
    """
    topic_data = _as_dict(parsed.get("topic"))
    storyline_data = _as_dict(parsed.get("storyline"))
    timestamp = now_ms()

    topic = Topic.from_dict({
        **topic_data,
        "semantic_tags": _as_str_list(topic_data.get("tags")),
        "timestamp": timestamp,
        "reviews": [],
        "evidence": [],
    })
    storyline = Storyline.from_dict({
        "introduction": storyline_data.get("introduction"),
        "body": storyline_data.get("body"),
        "conclusion": storyline_data.get("conclusion"),
        "title": parsed.get("title"),
        "synopsis": parsed.get("synopsis"),
        "tags": parsed.get("tags"),
        "timestamp": timestamp,
    })
    return Hypothesis(
        title=_as_str(parsed.get("title"), UNTITLED_HYPOTHESIS),
        synopsis=_as_str(parsed.get("synopsis")),
        tags=_as_str_list(parsed.get("tags")),
        timestamp=timestamp,
        topic=topic,
        thesis=_as_str(parsed.get("thesis")),
        storyline=storyline,
        evidence=[narrative] if narrative is not None else [],
    )
