"""
Repository pattern for the usage ledger.

Append-only storage of language call usage and its estimated cost.
"""

import logging
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from ..core.pricing import estimate
from ..core.token_counter import TokenUsage
from .db import DEFAULT_DB_PATH, get_connection
from .models import LLMUsageEvent

logger = logging.getLogger(__name__)

_COLUMNS = (
    "timestamp, agent, model, prompt_tokens, completion_tokens, total_tokens, "
    "estimated_cost, cached_tokens, retry_count, request_id"
)


def _row_to_event(row) -> LLMUsageEvent:
    return LLMUsageEvent(
        timestamp=datetime.fromisoformat(row[0]),
        agent=row[1],
        model=row[2],
        prompt_tokens=row[3],
        completion_tokens=row[4],
        total_tokens=row[5],
        estimated_cost=row[6],
        cached_tokens=row[7],
        retry_count=row[8],
        request_id=row[9],
    )


def initialize_schema(db_path: str = DEFAULT_DB_PATH) -> None:
    """Create the llm_usage_event table if it doesn't exist.

    No UPDATE or DELETE operations should ever be performed on this table.
    """
    conn = get_connection(db_path)
    try:
        conn.execute("""
            CREATE TABLE IF NOT EXISTS llm_usage_event (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                timestamp TEXT NOT NULL,
                agent TEXT NOT NULL,
                model TEXT NOT NULL,
                prompt_tokens INTEGER NOT NULL,
                completion_tokens INTEGER NOT NULL,
                total_tokens INTEGER NOT NULL,
                estimated_cost REAL NOT NULL,
                cached_tokens INTEGER NOT NULL DEFAULT 0,
                retry_count INTEGER NOT NULL DEFAULT 0,
                request_id TEXT
            )
        """)
        conn.commit()
    finally:
        conn.close()


def insert_usage_event(event: LLMUsageEvent, db_path: str = DEFAULT_DB_PATH) -> None:
    """Insert a single usage event into the append-only ledger.

    Args:
        event: The usage event to record
        db_path: Path to SQLite database file
    """
    conn = get_connection(db_path)
    try:
        conn.execute(f"""
            INSERT INTO llm_usage_event ({_COLUMNS})
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """, (
            event.timestamp.isoformat(),
            event.agent,
            event.model,
            event.prompt_tokens,
            event.completion_tokens,
            event.total_tokens,
            event.estimated_cost,
            event.cached_tokens,
            event.retry_count,
            event.request_id,
        ))
        conn.commit()
    finally:
        conn.close()


def fetch_recent_usage_events(
    agent: Optional[str] = None,
    model: Optional[str] = None,
    limit: int = 100,
    db_path: str = DEFAULT_DB_PATH,
) -> List[LLMUsageEvent]:
    """Fetch recent usage events, optionally filtered by agent and model.

    Returns:
        List of usage events ordered by timestamp (newest first)
    """
    return UsageRepository(db_path).get_recent_events(agent=agent, model=model, limit=limit)


class UsageRepository:
    """Read access to the usage ledger."""

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path

    def get_recent_events(
        self,
        agent: Optional[str] = None,
        model: Optional[str] = None,
        days: Optional[int] = None,
        limit: int = 1000,
    ) -> List[LLMUsageEvent]:
        """Get recent usage events with optional filtering.

        Args:
            agent: Optional filter for a specific agent
            model: Optional filter for a specific model
            days: Optional number of days to look back
            limit: Maximum number of events to return

        Returns:
            List of usage events ordered by timestamp (newest first)
        """
        conn = get_connection(self.db_path)
        try:
            query = f"SELECT {_COLUMNS} FROM llm_usage_event"
            params = []
            conditions = []

            if agent:
                conditions.append("agent = ?")
                params.append(agent)
            if model:
                conditions.append("model = ?")
                params.append(model)
            if days is not None:
                cutoff = (datetime.now() - timedelta(days=days)).isoformat()
                conditions.append("timestamp >= ?")
                params.append(cutoff)

            if conditions:
                query += " WHERE " + " AND ".join(conditions)

            query += " ORDER BY timestamp DESC LIMIT ?"
            params.append(limit)

            cursor = conn.execute(query, params)
            return [_row_to_event(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_usage_stats(
        self,
        agent: Optional[str] = None,
        model: Optional[str] = None,
        days: int = 30,
    ) -> Dict[str, float]:
        """Get usage statistics for the specified time period.

        Returns:
            Dictionary with total_requests, total_cost, avg_cost,
            total_tokens and total_retries
        """
        conn = get_connection(self.db_path)
        try:
            cutoff = (datetime.now() - timedelta(days=days)).isoformat()

            query = """
                SELECT
                    COUNT(*) as total_requests,
                    SUM(estimated_cost) as total_cost,
                    AVG(estimated_cost) as avg_cost,
                    SUM(total_tokens) as total_tokens,
                    SUM(retry_count) as total_retries
                FROM llm_usage_event
                WHERE timestamp >= ?
            """
            params = [cutoff]

            if agent:
                query += " AND agent = ?"
                params.append(agent)
            if model:
                query += " AND model = ?"
                params.append(model)

            row = conn.execute(query, params).fetchone()

            return {
                "total_requests": row[0] or 0,
                "total_cost": float(row[1] or 0),
                "avg_cost": float(row[2] or 0),
                "total_tokens": row[3] or 0,
                "total_retries": row[4] or 0,
            }
        finally:
            conn.close()


class UsageLedger:
    """Gateway usage recorder that appends each call to the ledger.

    Failures are loud: a write error propagates to the caller.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH, agent: str = "Unnamed"):
        self.db_path = db_path
        self.agent = agent
        initialize_schema(db_path)

    def __call__(
        self,
        model: str,
        usage: TokenUsage,
        retry_count: int = 0,
        request_id: Optional[str] = None,
    ) -> LLMUsageEvent:
        event = LLMUsageEvent(
            timestamp=datetime.now(),
            agent=self.agent,
            model=model,
            prompt_tokens=usage.prompt_tokens,
            completion_tokens=usage.completion_tokens,
            total_tokens=usage.total_tokens,
            estimated_cost=estimate(model, usage.prompt_tokens, usage.completion_tokens),
            cached_tokens=usage.cached_tokens,
            retry_count=retry_count,
            request_id=request_id,
        )
        insert_usage_event(event, self.db_path)
        logger.debug("Recorded usage for %s: $%.6f", model, event.estimated_cost)
        return event
