"""SQLite storage for trace events."""

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import resolve_db_path
from ..models import TraceEvent

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


class IStorage(Protocol):
    """Persistent storage for observability data (SQLite)."""

    async def init(self) -> None:
        """Open the database and create tables."""
        ...

    async def close(self) -> None:
        """Close database connection."""
        ...

    async def save_trace_event(self, event: TraceEvent) -> None:
        """Append a trace event."""
        ...

    async def get_trace_events(
        self,
        after: datetime | None = None,
        event_types: list[str] | None = None,
        actor: str | None = None,
        session_id: str | None = None,
        limit: int = 100,
    ) -> list[TraceEvent]:
        """Trace events matching every given filter, newest first."""
        ...

    async def clear(self) -> None:
        """Delete every trace event."""
        ...


class Storage:
    """Trace events in a single SQLite table.

    Events are indexed by the ``session_id`` found in their data, so one
    conversation can be replayed without scanning the whole table.
    """

    def __init__(self, db_path: str | Path | None = None):
        self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        self._conn = await aiosqlite.connect(self._db_path)
        await self._conn.executescript(SCHEMA_PATH.read_text(encoding="utf-8"))
        await self._conn.commit()

    async def close(self) -> None:
        if self._conn:
            await self._conn.close()
            self._conn = None

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Storage not initialized")
        return self._conn

    async def save_trace_event(self, event: TraceEvent) -> None:
        session_id = event.data.get("session_id")
        await self.conn.execute(
            """
            INSERT INTO trace_events (id, event_type, actor, session_id, data, timestamp)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                event.id or str(uuid.uuid4()),
                event.event_type,
                event.actor,
                str(session_id) if session_id is not None else None,
                json.dumps(event.data, default=str),
                _to_utc(event.timestamp).isoformat(),
            ),
        )
        await self.conn.commit()

    async def get_trace_events(
        self,
        after: datetime | None = None,
        event_types: list[str] | None = None,
        actor: str | None = None,
        session_id: str | None = None,
        limit: int = 100,
    ) -> list[TraceEvent]:
        """Trace events matching every given filter, newest first."""
        conditions = []
        params: list = []

        if after:
            conditions.append("timestamp > ?")
            params.append(_to_utc(after).isoformat())
        if event_types:
            conditions.append(f"event_type IN ({','.join('?' * len(event_types))})")
            params.extend(event_types)
        if actor:
            conditions.append("actor = ?")
            params.append(actor)
        if session_id:
            conditions.append("session_id = ?")
            params.append(session_id)

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        params.append(limit)

        cursor = await self.conn.execute(
            f"""
            SELECT id, event_type, actor, data, timestamp
            FROM trace_events
            {where_clause}
            ORDER BY timestamp DESC, rowid DESC
            LIMIT ?
            """,
            params,
        )
        return [_row_to_event(row) for row in await cursor.fetchall()]

    async def clear(self) -> None:
        await self.conn.execute("DELETE FROM trace_events")
        await self.conn.commit()


def _row_to_event(row: tuple) -> TraceEvent:
    id, event_type, actor, data, timestamp = row
    return TraceEvent(
        id=id,
        event_type=event_type,
        actor=actor,
        data=json.loads(data),
        timestamp=datetime.fromisoformat(timestamp),
    )


def _to_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC so string ordering stays valid.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
