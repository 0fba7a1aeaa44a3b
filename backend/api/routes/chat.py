"""
api/routes/chat.py
------------------
Assistant chat endpoints.

Flow:
  1. POST /v1/chat/sessions                    → session_id + greeting
  2. POST /v1/chat/sessions/{id}/messages      → model reply (with citations)
  3. GET  /v1/chat/sessions/{id}               → full message history
  4. DELETE /v1/chat/sessions/{id}             → discard the session

Sessions live in process memory and are lost on restart.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from modules.assistant.chat_client import AssistantChatClient
from modules.observability.logger import StructuredLogger, default_logger
from modules.session.chat_session import ChatSession
from schemas import ChatMessage, GeoPosition

router = APIRouter()

# key: session_id, value: ChatSession
_sessions: dict[str, ChatSession] = {}
_chat_client: Optional[AssistantChatClient] = None

# One journal shared by every session; None when EVENT_LOG_ENABLED is off.
_journal: Optional[StructuredLogger] = None
_journal_resolved = False


def get_chat_client() -> AssistantChatClient:
    global _chat_client
    if _chat_client is None:
        _chat_client = AssistantChatClient()
    return _chat_client


def get_sessions() -> dict[str, ChatSession]:
    return _sessions


def get_journal() -> Optional[StructuredLogger]:
    global _journal, _journal_resolved
    if not _journal_resolved:
        _journal = default_logger()
        _journal_resolved = True
    return _journal


# ── Request schemas ────────────────────────────────────────────────────────────

class CreateSessionRequest(BaseModel):
    location: Optional[GeoPosition] = Field(None, description="Device position, if the user shared it")


class SendRequest(BaseModel):
    message: str


def _ser_messages(session: ChatSession) -> list[dict]:
    return [m.model_dump(mode="json") for m in session.messages]


def _get(sessions: dict[str, ChatSession], session_id: str) -> ChatSession:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Chat session {session_id} not found")
    return session


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.post("/sessions", summary="Open a chat session")
def create_session(
    req: CreateSessionRequest,
    client: AssistantChatClient = Depends(get_chat_client),
    sessions: dict[str, ChatSession] = Depends(get_sessions),
    journal: Optional[StructuredLogger] = Depends(get_journal),
) -> dict:
    session = ChatSession(client, location=req.location, journal=journal)
    sessions[session.session_id] = session
    return {
        "session_id":   session.session_id,
        "has_location": session.location is not None,
        "messages":     _ser_messages(session),
    }


@router.get("/sessions/{session_id}", summary="Chat history")
def get_session(
    session_id: str,
    sessions: dict[str, ChatSession] = Depends(get_sessions),
) -> dict:
    session = _get(sessions, session_id)
    return {"session_id": session_id, "loading": session.loading, "messages": _ser_messages(session)}


@router.post("/sessions/{session_id}/messages", summary="Send one chat turn")
def send_message(
    session_id: str,
    req: SendRequest,
    sessions: dict[str, ChatSession] = Depends(get_sessions),
) -> dict:
    session = _get(sessions, session_id)
    if not req.message.strip():
        raise HTTPException(status_code=422, detail="Message must not be blank")
    reply: Optional[ChatMessage] = session.send(req.message)
    if reply is None:
        raise HTTPException(status_code=409, detail="A reply is still being generated")
    return {"session_id": session_id, "reply": reply.model_dump(mode="json")}


@router.delete("/sessions/{session_id}", summary="Discard a chat session")
def delete_session(
    session_id: str,
    sessions: dict[str, ChatSession] = Depends(get_sessions),
) -> dict:
    session = _get(sessions, session_id)
    sessions.pop(session_id, None)
    session.close()
    return {"session_id": session_id, "deleted": True}
