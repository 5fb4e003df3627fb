"""
Persistence sink for narratives, hypotheses and topics.

Each save writes one pretty-printed JSON file under a type-specific
directory, named from the record's title and timestamp.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Union

from ..core.records import RECORD_KINDS, Hypothesis, Narrative, Topic

logger = logging.getLogger(__name__)

DEFAULT_MEMORY_DIR = "save/memory"

Record = Union[Narrative, Hypothesis, Topic]

_UNSAFE_TITLE_CHARS = re.compile(r"[^a-zA-Z0-9]")


def filename_for(record: Record) -> str:
    """<sanitized lowercase title>_<timestamp>.json"""
    sanitized = _UNSAFE_TITLE_CHARS.sub("_", record.title).lower()
    return f"{sanitized}_{record.timestamp}.json"


class MemoryStore:
    """Writes records to disk exactly once per save call.

    A second save of a record with the same title and timestamp
    overwrites the first file.
    """

    def __init__(self, base_dir: Union[str, Path] = DEFAULT_MEMORY_DIR):
        self.base_dir = Path(base_dir)

    def _kind_dir(self, kind: str) -> Path:
        if kind not in RECORD_KINDS:
            raise ValueError(f"Unknown record kind: {kind}")
        return self.base_dir / kind

    def save(self, record: Record, kind: str) -> Path:
        """Serialize a record to <base_dir>/<kind>/<filename>.

        Returns:
            Path of the written file

        Raises:
            ValueError: If kind is unknown
            TypeError: If the record holds a value JSON cannot encode
            OSError: If the write fails

        Failures are logged, then re-raised. Nothing is written when
        serialization fails.
        """
        dir_path = self._kind_dir(kind)
        file_path = dir_path / filename_for(record)
        try:
            body = json.dumps(record.to_dict(), indent=2, ensure_ascii=False)
            dir_path.mkdir(parents=True, exist_ok=True)
            with open(file_path, "w", encoding="utf-8") as f:
                f.write(body)
        except (OSError, TypeError, ValueError):
            logger.exception("Failed to save %s: %s", kind, file_path)
            raise
        logger.info("Saved %s: %s", kind, file_path)
        return file_path

    def save_narrative(self, narrative: Narrative) -> Path:
        return self.save(narrative, "narrative")

    def save_hypothesis(self, hypothesis: Hypothesis) -> Path:
        return self.save(hypothesis, "hypothesis")

    def save_topic(self, topic: Topic) -> Path:
        return self.save(topic, "topic")

    def load(self, kind: str, filename: str) -> Dict[str, Any]:
        """Read a saved record back as a dict."""
        with open(self._kind_dir(kind) / filename, "r", encoding="utf-8") as f:
            return json.load(f)

    def list_saved(self, kind: str) -> List[str]:
        """Filenames saved under a kind, sorted."""
        dir_path = self._kind_dir(kind)
        if not dir_path.exists():
            return []
        return sorted(p.name for p in dir_path.glob("*.json"))
