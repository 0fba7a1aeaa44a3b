"""
Session event journal: append-only JSONL, one object per line.

Usage:
    from modules.observability.logger import StructuredLogger

    journal = StructuredLogger()
    journal.log("chat_3f2a", "USER_MESSAGE", {"content": "士林夜市怎麼去？"})

Records are written to  <EVENT_LOG_DIR>/<session_id>.jsonl.
"""

from __future__ import annotations

import json
import os
import threading
from datetime import datetime, timezone
from pathlib import Path

import config


class StructuredLogger:
    """Thread-safe, append-only JSONL logger keyed by session id."""

    def __init__(self, logs_dir: Path | str | None = None) -> None:
        self._logs_dir = Path(logs_dir or config.EVENT_LOG_DIR)
        self._lock = threading.Lock()
        self._handles: dict[str, object] = {}  # session_id -> file handle

    @property
    def logs_dir(self) -> Path:
        return self._logs_dir

    def path_for(self, session_id: str) -> Path:
        return self._logs_dir / f"{session_id}.jsonl"

    # ── public API ────────────────────────────────────────────────────────

    def log(self, session_id: str, event_type: str, payload: dict) -> None:
        """Append one record to ``<session_id>.jsonl``."""
        record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "session_id": session_id,
            "event_type": event_type,
            "payload": payload,
        }
        line = json.dumps(record, default=str, ensure_ascii=False) + "\n"

        with self._lock:
            fh = self._handles.get(session_id)
            if fh is None:
                fh = self._open(session_id)
            fh.write(line)  # type: ignore[union-attr]
            fh.flush()  # type: ignore[union-attr]

    def read(self, session_id: str) -> list[dict]:
        """Return every record logged for *session_id*, oldest first."""
        path = self.path_for(session_id)
        if not path.exists():
            raise FileNotFoundError(f"Log file not found: {path}")
        with open(path, "r", encoding="utf-8") as fh:
            return [json.loads(line) for line in fh if line.strip()]

    def close(self, session_id: str | None = None) -> None:
        """Close one or all open file handles."""
        with self._lock:
            if session_id:
                fh = self._handles.pop(session_id, None)
                if fh:
                    fh.close()  # type: ignore[union-attr]
            else:
                for fh in self._handles.values():
                    fh.close()  # type: ignore[union-attr]
                self._handles.clear()

    # ── internals ─────────────────────────────────────────────────────────

    def _open(self, session_id: str):  # noqa: ANN202
        os.makedirs(self._logs_dir, exist_ok=True)
        fh = open(self.path_for(session_id), "a", encoding="utf-8")  # noqa: SIM115
        self._handles[session_id] = fh
        return fh


def default_logger() -> StructuredLogger | None:
    """Journal used by the CLI and API, or None when EVENT_LOG_ENABLED is off."""
    return StructuredLogger() if config.EVENT_LOG_ENABLED else None
