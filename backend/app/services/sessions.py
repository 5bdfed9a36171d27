"""
Study Session Repository

The session record store: one collection of study sessions per user,
supporting append (upsert), update-by-id, delete-by-id, full-scan read, and
merging of remote records.

Lifecycle:
    Sessions are created with minimal fields (selection, source document)
    before analysis, mutated in place as analysis results and progress
    arrive, and only deleted by explicit user action.

The repository owns persistence; analytics and goal computations receive
the snapshot returned by list_sessions() and never hold on to it.

Usage:
    from app.services.sessions import SessionRepository

    repo = SessionRepository(store)
    session = await repo.add_session(user_id, SessionCreate(pdf_name="notes.pdf"))
    await repo.update_progress(user_id, session.id, SessionProgressUpdate(time_spent=5))
    snapshot = await repo.list_sessions(user_id)
"""

import logging
import random
import string
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from app.middleware.error_handling import NotFoundError
from app.models.sessions import (
    SessionCreate,
    SessionProgressUpdate,
    StudySession,
)
from app.services.storage import RecordStore

logger = logging.getLogger(__name__)

SESSIONS_KIND = "sessions"
SELECTED_TEXT_PREVIEW_LENGTH = 100

_ID_ALPHABET = string.digits + string.ascii_lowercase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_session_id(now: datetime) -> str:
    """Session id: epoch milliseconds plus 8 random base36 characters."""
    suffix = "".join(random.choices(_ID_ALPHABET, k=8))
    return f"{int(now.timestamp() * 1000)}-{suffix}"


def sort_newest_first(sessions: Iterable[StudySession]) -> list[StudySession]:
    """Order sessions by timestamp descending; sessions without one go last."""
    return sorted(
        sessions,
        key=lambda s: s.timestamp.timestamp() if s.timestamp else float("-inf"),
        reverse=True,
    )


class SessionRepository:
    """
    Per-user study session collection on top of a RecordStore.

    Args:
        store: Storage backend.
        clock: Source of the current time (injectable for tests).
    """

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = _utcnow):
        self.store = store
        self.clock = clock

    def _parse(self, record: Mapping[str, Any]) -> Optional[StudySession]:
        try:
            return StudySession.model_validate(dict(record))
        except PydanticValidationError as e:
            logger.warning(f"Skipping unreadable session record {record.get('id')}: {e}")
            return None

    async def list_sessions(self, user_id: str) -> list[StudySession]:
        """
        Full-scan read of a user's sessions, newest first.

        Records that cannot be parsed at all (e.g. missing id) are skipped.
        """
        records = await self.store.get_all(SESSIONS_KIND, user_id)
        sessions = [s for s in (self._parse(r) for r in records.values()) if s is not None]
        return sort_newest_first(sessions)

    async def get_session(self, user_id: str, session_id: str) -> StudySession:
        """
        Get one session.

        Raises:
            NotFoundError: No session with this id.
        """
        record = await self.store.get(SESSIONS_KIND, user_id, session_id)
        session = self._parse(record) if record is not None else None
        if session is None:
            raise NotFoundError(f"Session {session_id} not found")
        return session

    async def add_session(self, user_id: str, request: SessionCreate) -> StudySession:
        """
        Record a session.

        A new session gets a generated id (unless supplied) and the current
        time as its timestamp. If a session with the same id exists, the
        supplied fields are merged into it and its timestamp is kept.
        """
        now = self.clock()
        session_id = request.id or generate_session_id(now)
        existing = await self.store.get(SESSIONS_KIND, user_id, session_id)

        # Only explicitly supplied fields overwrite an existing session
        data = request.model_dump(
            exclude={"id"}, exclude_unset=existing is not None, mode="json"
        )
        if "full_selected_text" in data:
            data["selected_text"] = data["full_selected_text"][:SELECTED_TEXT_PREVIEW_LENGTH]

        if existing is not None:
            record = {**existing, **data, "id": session_id}
            logger.info(f"Updated session {session_id} for user {user_id}")
        else:
            record = {**data, "id": session_id, "timestamp": now.isoformat()}
            logger.info(f"Added session {session_id} for user {user_id}")

        session = StudySession.model_validate(record)
        await self.store.put(SESSIONS_KIND, user_id, session_id, session.model_dump(mode="json"))
        return session

    async def update_progress(
        self, user_id: str, session_id: str, update: SessionProgressUpdate
    ) -> StudySession:
        """
        Apply a progress update to a session.

        completed_steps/total_steps replace the stored values, time_spent is
        added to the accumulated total, and supplying analysis_result (or
        analysis_complete=True) marks the analysis as complete.

        Raises:
            NotFoundError: No session with this id.
        """
        session = await self.get_session(user_id, session_id)
        changes = update.model_dump(exclude_unset=True, exclude_none=True)

        if "time_spent" in changes:
            changes["time_spent"] = session.time_spent + changes["time_spent"]
        if update.analysis_complete or update.analysis_result is not None:
            changes["analysis_complete"] = True

        updated = session.model_copy(update=changes)
        # Re-validate so the merged record obeys the same field policy as stored ones
        updated = StudySession.model_validate(updated.model_dump())
        await self.store.put(SESSIONS_KIND, user_id, session_id, updated.model_dump(mode="json"))

        logger.info(
            f"Progress for session {session_id}: steps={updated.completed_steps}/"
            f"{updated.total_steps}, minutes={updated.time_spent}, "
            f"analysis_complete={updated.analysis_complete}"
        )
        return updated

    async def delete_session(self, user_id: str, session_id: str) -> None:
        """
        Delete a session.

        Raises:
            NotFoundError: No session with this id.
        """
        if not await self.store.delete(SESSIONS_KIND, user_id, session_id):
            raise NotFoundError(f"Session {session_id} not found")
        logger.info(f"Deleted session {session_id} for user {user_id}")

    async def merge_sessions(self, user_id: str, remote: Iterable[Mapping[str, Any]]) -> int:
        """
        Merge remote session records into the user's collection.

        Remote fields win over local ones for the same id; local-only fields
        are kept. Records without an id are skipped.

        Returns:
            int: Number of records merged.
        """
        local = await self.store.get_all(SESSIONS_KIND, user_id)
        merged: dict[str, dict[str, Any]] = {}

        for record in remote:
            session_id = record.get("id")
            if not session_id:
                continue
            session = self._parse({**local.get(session_id, {}), **record})
            if session is not None:
                merged[session.id] = session.model_dump(mode="json")

        await self.store.put_many(SESSIONS_KIND, user_id, merged)
        logger.info(f"Merged {len(merged)} remote sessions for user {user_id}")
        return len(merged)
