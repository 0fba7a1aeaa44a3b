"""
modules/observability/replay.py
---------------------------------
Print the transcript of a recorded session from its JSONL journal.

Usage:
    python main.py --replay <session_id>

Reads <EVENT_LOG_DIR>/<session_id>.jsonl and renders USER_MESSAGE,
MODEL_MESSAGE and CHAT_FAILURE events in order, plus browse events
unless ``chat_only`` is set.
No network calls are made; this is a pure log replay.
"""

from __future__ import annotations

from modules.observability.logger import StructuredLogger

_CHAT_EVENT_TYPES = frozenset({"USER_MESSAGE", "MODEL_MESSAGE", "CHAT_FAILURE"})


def format_event(rec: dict) -> str:
    """Render one journal record as a single transcript line."""
    event_type = rec.get("event_type", "")
    ts = rec.get("timestamp", "")
    payload = rec.get("payload", {})

    if event_type == "USER_MESSAGE":
        return f"{ts}  你：{payload.get('content', '')}"
    if event_type == "MODEL_MESSAGE":
        line = f"{ts}  AI：{payload.get('content', '')}"
        urls = payload.get("grounding_urls") or []
        if urls:
            line += "\n" + "\n".join(f"    ↳ {u.get('title', '')} {u.get('uri', '')}" for u in urls)
        return line
    if event_type == "CHAT_FAILURE":
        return f"{ts}  [chat failure] {payload.get('error', '')}"
    details = ", ".join(f"{k}={v!r}" for k, v in payload.items())
    return f"{ts}  [{event_type}] {details}"


def is_chat_event(rec: dict) -> bool:
    return rec.get("event_type") in _CHAT_EVENT_TYPES


def replay_session(
    session_id: str,
    journal: StructuredLogger | None = None,
    chat_only: bool = False,
) -> list[str]:
    """Return the transcript lines of a recorded session."""
    journal = journal or StructuredLogger()
    records = journal.read(session_id)
    if chat_only:
        records = [rec for rec in records if is_chat_event(rec)]
    return [format_event(rec) for rec in records]
