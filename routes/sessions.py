"""
Conversation session routes for SiteCraft
"""
from fastapi import APIRouter, HTTPException, status, Depends
from typing import List, Optional
import logging

from models.conversation import SessionCreate, SessionResponse, SubmitMessageRequest, VersionHistoryEntry
from routes.dependencies import check_rate_limit, get_session_store
from services.conversation_service import ConversationSession, SessionStore
from services.exceptions import NotFoundError

router = APIRouter(prefix="/api/sessions", tags=["Sessions"])
logger = logging.getLogger(__name__)


def to_session_response(session: ConversationSession) -> SessionResponse:
    return SessionResponse(
        id=session.id,
        state=session.state.value,
        is_refining=session.is_refining,
        is_generating=session.is_generating,
        messages=session.messages,
        current_code=session.current_code,
        version_count=len(session.version_history),
    )


def load_session(session_id: str, store: SessionStore) -> ConversationSession:
    try:
        return store.get(session_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    request: Optional[SessionCreate] = None,
    store: SessionStore = Depends(get_session_store),
):
    """Start a new conversation."""
    session = store.create(default_options=request.options if request else None)
    return to_session_response(session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    return to_session_response(load_session(session_id, store))


@router.post("/{session_id}/messages", response_model=SessionResponse)
async def submit_message(
    session_id: str,
    request: SubmitMessageRequest,
    _: None = Depends(check_rate_limit),
    store: SessionStore = Depends(get_session_store),
):
    """
    Send the next user message. The first message generates a site, later
    ones refine it. Failures show up as an assistant message, not an HTTP error.
    """
    session = load_session(session_id, store)
    if not request.prompt.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Prompt is required")
    if session.is_generating:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A generation request is already in progress for this session"
        )

    await session.submit(request.prompt, request.options)
    return to_session_response(session)


@router.get("/{session_id}/versions", response_model=List[VersionHistoryEntry])
async def list_versions(session_id: str, store: SessionStore = Depends(get_session_store)):
    return load_session(session_id, store).version_history


@router.post("/{session_id}/versions/{version_id}/restore", response_model=SessionResponse)
async def restore_version(session_id: str, version_id: str, store: SessionStore = Depends(get_session_store)):
    """Make an earlier version the current code again."""
    session = load_session(session_id, store)
    if session.is_generating:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A generation request is already in progress for this session"
        )
    try:
        session.restore_version(version_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return to_session_response(session)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    if not store.delete(session_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Session '{session_id}' not found")
    logger.info(f"Deleted session {session_id}")
