"""
Research Store - persistent research log on SQLite

Each finished piece of research can be saved with a credibility rating
and its sources, then looked up by id or searched by keyword in later
sessions. Writes from concurrent sessions are serialized by SQLite
transactions.
"""

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, List, Optional, Union

import aiosqlite

logger = logging.getLogger(__name__)

ANSWER_PREVIEW_CHARS = 300

_CREATE_TABLE = """
CREATE TABLE IF NOT EXISTS research (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    query TEXT NOT NULL,
    answer TEXT NOT NULL,
    credibility TEXT DEFAULT 'medium',
    sources TEXT DEFAULT '',
    timestamp TEXT DEFAULT (datetime('now'))
)
"""

# Columns added after the first schema version
_MIGRATED_COLUMNS = {
    "credibility": "TEXT DEFAULT 'medium'",
    "sources": "TEXT DEFAULT ''",
}


@dataclass(frozen=True)
class ResearchEntry:
    """One saved piece of research."""
    id: int
    query: str
    answer: str
    credibility: str
    sources: str
    timestamp: str

    def format(self, preview: bool = False) -> str:
        answer = self.answer
        if preview and len(answer) > ANSWER_PREVIEW_CHARS:
            answer = answer[:ANSWER_PREVIEW_CHARS] + "..."
        text = (
            f"#{self.id} {self.timestamp} [credibility: {self.credibility}]\n"
            f"Q: {self.query}\nA: {answer}"
        )
        if self.sources:
            text += f"\nSources: {self.sources}"
        return text


class ResearchStore:
    """Async access to the research table."""

    def __init__(self, db_path: Union[str, Path]):
        self._db_path = str(db_path)
        self._schema_ready = False

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield a connection with the schema in place. Commits on success."""
        async with aiosqlite.connect(self._db_path) as conn:
            conn.row_factory = aiosqlite.Row
            if not self._schema_ready:
                await self._ensure_schema(conn)
                self._schema_ready = True
            try:
                yield conn
                await conn.commit()
            except Exception:
                await conn.rollback()
                logger.exception("Research store operation failed, transaction rolled back.")
                raise

    async def _ensure_schema(self, conn: aiosqlite.Connection) -> None:
        await conn.execute(_CREATE_TABLE)
        async with conn.execute("PRAGMA table_info(research)") as cursor:
            existing = {row["name"] for row in await cursor.fetchall()}
        for column, definition in _MIGRATED_COLUMNS.items():
            if column not in existing:
                logger.info(f"Migrating research table: adding column {column}")
                await conn.execute(f"ALTER TABLE research ADD COLUMN {column} {definition}")
        await conn.commit()

    async def save(
        self,
        query: str,
        answer: str,
        credibility: str = "medium",
        sources: str = "",
    ) -> int:
        """
        Insert a research entry.

        Returns:
            The new entry's id
        """
        async with self._connect() as conn:
            cursor = await conn.execute(
                "INSERT INTO research (query, answer, credibility, sources) VALUES (?, ?, ?, ?)",
                (query, answer, credibility, sources),
            )
            entry_id = cursor.lastrowid
        logger.info(f"💾 Saved research #{entry_id}: {query[:50]}")
        return entry_id

    async def get(self, entry_id: int) -> Optional[ResearchEntry]:
        async with self._connect() as conn:
            async with conn.execute(
                "SELECT id, query, answer, credibility, sources, timestamp FROM research WHERE id = ?",
                (entry_id,),
            ) as cursor:
                row = await cursor.fetchone()
        return _to_entry(row) if row else None

    async def search(self, keyword: str, limit: int = 5) -> List[ResearchEntry]:
        """Newest entries whose query or answer contains the keyword."""
        pattern = f"%{keyword}%"
        async with self._connect() as conn:
            async with conn.execute(
                "SELECT id, query, answer, credibility, sources, timestamp FROM research "
                "WHERE query LIKE ? OR answer LIKE ? ORDER BY timestamp DESC, id DESC LIMIT ?",
                (pattern, pattern, limit),
            ) as cursor:
                rows = await cursor.fetchall()
        return [_to_entry(row) for row in rows]


def _to_entry(row: aiosqlite.Row) -> ResearchEntry:
    return ResearchEntry(
        id=row["id"],
        query=row["query"],
        answer=row["answer"],
        credibility=row["credibility"] or "medium",
        sources=row["sources"] or "",
        timestamp=row["timestamp"],
    )
