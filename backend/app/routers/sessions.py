"""
Study Sessions API Router

Endpoints for recording study sessions and their progress.

Endpoints:
- GET /api/sessions - List sessions (newest first)
- POST /api/sessions - Record a session (upsert by id)
- POST /api/sessions/sync - Merge remote session records
- GET /api/sessions/{session_id} - Get a session
- PATCH /api/sessions/{session_id}/progress - Record progress / analysis results
- DELETE /api/sessions/{session_id} - Delete a session
"""

import logging

from fastapi import APIRouter, Depends, status

from app.dependencies import CurrentUserId, get_session_repository
from app.middleware.error_handling import handle_endpoint_errors
from app.models.base import SuccessResponse
from app.models.sessions import (
    SessionCreate,
    SessionProgressUpdate,
    SessionSyncRequest,
    SessionSyncResponse,
    StudySession,
)
from app.services.sessions import SessionRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.get("", response_model=list[StudySession])
@handle_endpoint_errors("List sessions")
async def list_sessions(
    user_id: str = CurrentUserId,
    repo: SessionRepository = Depends(get_session_repository),
) -> list[StudySession]:
    """List the user's sessions, newest first."""
    return await repo.list_sessions(user_id)


@router.post("", response_model=StudySession, status_code=status.HTTP_201_CREATED)
@handle_endpoint_errors("Create session")
async def create_session(
    request: SessionCreate,
    user_id: str = CurrentUserId,
    repo: SessionRepository = Depends(get_session_repository),
) -> StudySession:
    """
    Record a study session.

    If a session with the same id exists, the supplied fields are merged
    into it.
    """
    return await repo.add_session(user_id, request)


@router.post("/sync", response_model=SessionSyncResponse)
@handle_endpoint_errors("Sync sessions")
async def sync_sessions(
    request: SessionSyncRequest,
    user_id: str = CurrentUserId,
    repo: SessionRepository = Depends(get_session_repository),
) -> SessionSyncResponse:
    """Merge remote session records into the local collection."""
    merged = await repo.merge_sessions(user_id, request.sessions)
    total = len(await repo.list_sessions(user_id))
    return SessionSyncResponse(merged=merged, total=total)


@router.get("/{session_id}", response_model=StudySession)
@handle_endpoint_errors("Get session")
async def get_session(
    session_id: str,
    user_id: str = CurrentUserId,
    repo: SessionRepository = Depends(get_session_repository),
) -> StudySession:
    """Get a single session."""
    return await repo.get_session(user_id, session_id)


@router.patch("/{session_id}/progress", response_model=StudySession)
@handle_endpoint_errors("Update session progress")
async def update_session_progress(
    session_id: str,
    update: SessionProgressUpdate,
    user_id: str = CurrentUserId,
    repo: SessionRepository = Depends(get_session_repository),
) -> StudySession:
    """
    Record progress on a session.

    time_spent is added to the accumulated minutes; analysis_result marks
    the analysis as complete.
    """
    return await repo.update_progress(user_id, session_id, update)


@router.delete("/{session_id}", response_model=SuccessResponse)
@handle_endpoint_errors("Delete session")
async def delete_session(
    session_id: str,
    user_id: str = CurrentUserId,
    repo: SessionRepository = Depends(get_session_repository),
) -> SuccessResponse:
    """Delete a session."""
    await repo.delete_session(user_id, session_id)
    return SuccessResponse(message=f"Session {session_id} deleted")
