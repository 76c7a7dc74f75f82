import asyncio
from datetime import UTC, date, datetime
from uuid import uuid4
from weakref import WeakKeyDictionary

import aiosqlite
import structlog

from app.exceptions import PersistenceError
from app.stories.models import MAX_QUESTIONS, ApprovalStatus
from app.stories.schemas import CandidateStory, StoryFilter

logger = structlog.get_logger()

QUESTION_COLUMNS = [f"question_{n}" for n in range(1, MAX_QUESTIONS + 1)]

# one writer per connection; a commit or rollback covers every pending statement on it
_write_locks: WeakKeyDictionary[aiosqlite.Connection, asyncio.Lock] = WeakKeyDictionary()


def write_lock(db: aiosqlite.Connection) -> asyncio.Lock:
    lock = _write_locks.get(db)
    if lock is None:
        lock = _write_locks[db] = asyncio.Lock()
    return lock


def _to_iso(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


class StoryRepository:
    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db
        self._lock = write_lock(db)

    async def insert(
        self,
        story: CandidateStory,
        approval_status: ApprovalStatus,
        uploaded_by: str,
    ) -> str:
        """Insert one story with its tags and interviewees and commit it.

        Each call is its own unit of work; a failure rolls back only this story.
        """
        story_id = str(uuid4())
        now = datetime.now(UTC).isoformat()
        questions = story.questions + [None] * (MAX_QUESTIONS - len(story.questions))

        async with self._lock:
            try:
                await self._db.execute(
                    f"""
                    INSERT INTO stories (
                        id, idea_title, idea_description, {", ".join(QUESTION_COLUMNS)},
                        coverage_start_date, coverage_end_date, uploaded_by,
                        approval_status, approved_by, created_at, updated_at
                    ) VALUES ({", ".join("?" * (10 + MAX_QUESTIONS))})
                    """,
                    (
                        story_id,
                        story.title.strip(),
                        story.description.strip(),
                        *questions,
                        _to_iso(story.coverage_start_date),
                        _to_iso(story.coverage_end_date),
                        uploaded_by,
                        approval_status,
                        uploaded_by if approval_status == ApprovalStatus.approved else None,
                        now,
                        now,
                    ),
                )
                await self._link_tags(story_id, story.tags, uploaded_by)
                await self._link_interviewees(story_id, story.interviewees)
                await self._db.commit()
            except aiosqlite.Error as exc:
                await self._db.rollback()
                logger.warning("story_insert_failed", title=story.title, error=str(exc))
                raise PersistenceError(f"Failed to save story: {exc}") from exc

        logger.info(
            "story_inserted",
            story_id=story_id,
            approval_status=approval_status,
            tags=len(story.tags),
            interviewees=len(story.interviewees),
        )
        return story_id

    async def _link_tags(self, story_id: str, tags: list[str], created_by: str) -> None:
        for tag_name in tags:
            await self._db.execute(
                "INSERT INTO tags (tag_name, created_by) VALUES (?, ?) "
                "ON CONFLICT(tag_name) DO NOTHING",
                (tag_name, created_by),
            )
            cursor = await self._db.execute("SELECT id FROM tags WHERE tag_name = ?", (tag_name,))
            row = await cursor.fetchone()
            await self._db.execute(
                "INSERT OR IGNORE INTO story_tags (story_id, tag_id) VALUES (?, ?)",
                (story_id, row["id"]),
            )

    async def _link_interviewees(self, story_id: str, names: list[str]) -> None:
        for position, name in enumerate(names):
            await self._db.execute(
                "INSERT INTO interviewees (name) VALUES (?) ON CONFLICT(name) DO NOTHING",
                (name,),
            )
            cursor = await self._db.execute("SELECT id FROM interviewees WHERE name = ?", (name,))
            row = await cursor.fetchone()
            await self._db.execute(
                "INSERT INTO story_interviewees (story_id, interviewee_id, position) "
                "VALUES (?, ?, ?)",
                (story_id, row["id"], position),
            )

    async def get_by_id(self, story_id: str) -> dict | None:
        cursor = await self._db.execute("SELECT * FROM stories WHERE id = ?", (story_id,))
        row = await cursor.fetchone()
        if row is None:
            return None
        return await self._with_relations(dict(row))

    async def list_filtered(self, filters: StoryFilter) -> list[dict]:
        conditions: list[str] = []
        params: list = []

        if filters.approval_status is not None:
            conditions.append("s.approval_status = ?")
            params.append(filters.approval_status)
        if filters.tag is not None:
            conditions.append(
                "s.id IN (SELECT st.story_id FROM story_tags st "
                "JOIN tags t ON t.id = st.tag_id WHERE t.tag_name = ?)"
            )
            params.append(filters.tag)

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""
        params.extend([filters.limit, filters.offset])

        cursor = await self._db.execute(
            f"""
            SELECT s.* FROM stories s
            {where_clause}
            ORDER BY s.created_at DESC
            LIMIT ? OFFSET ?
            """,
            params,
        )
        rows = await cursor.fetchall()
        return [await self._with_relations(dict(row)) for row in rows]

    async def set_approval_status(
        self, story_id: str, status: ApprovalStatus, reviewed_by: str
    ) -> None:
        async with self._lock:
            await self._db.execute(
                "UPDATE stories SET approval_status = ?, approved_by = ?, updated_at = ? "
                "WHERE id = ?",
                (status, reviewed_by, datetime.now(UTC).isoformat(), story_id),
            )
            await self._db.commit()

    async def _with_relations(self, row: dict) -> dict:
        cursor = await self._db.execute(
            """
            SELECT t.tag_name FROM story_tags st
            JOIN tags t ON t.id = st.tag_id
            WHERE st.story_id = ?
            ORDER BY t.tag_name
            """,
            (row["id"],),
        )
        row["tags"] = [r["tag_name"] for r in await cursor.fetchall()]

        cursor = await self._db.execute(
            """
            SELECT i.name FROM story_interviewees si
            JOIN interviewees i ON i.id = si.interviewee_id
            WHERE si.story_id = ?
            ORDER BY si.position
            """,
            (row["id"],),
        )
        row["interviewees"] = [r["name"] for r in await cursor.fetchall()]
        return row
