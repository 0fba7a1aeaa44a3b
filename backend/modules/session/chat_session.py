"""
modules/session/chat_session.py
--------------------------------
ChatSession: state of one assistant chat panel.

  - messages: append-only, seeded with a greeting from the model
  - location: optional GeoPosition captured when the session is created
  - one turn at a time: a send while another is in flight is refused

A failed turn never propagates: it becomes an apologetic model message and
the session stays usable.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Optional

from modules.assistant.chat_client import AssistantChatClient
from modules.observability.logger import StructuredLogger
from schemas import ChatMessage, ChatTurn, GeoPosition

logger = logging.getLogger(__name__)

GREETING = "你好！我是你的台北旅遊 AI 助手。想知道哪裡好玩、好吃的，或是交通資訊都可以問我喔！"
APOLOGY = "抱歉，我現在遇到了一點連線問題，請稍後再試。"


class ChatSession:

    def __init__(
        self,
        client: AssistantChatClient,
        location: Optional[GeoPosition] = None,
        journal: StructuredLogger | None = None,
        session_id: str | None = None,
    ) -> None:
        self._client = client
        self._journal = journal
        self._turn_lock = threading.Lock()
        self.session_id = session_id or f"chat_{uuid.uuid4().hex[:12]}"
        self.location = location
        self.messages: list[ChatMessage] = [ChatMessage(role="model", content=GREETING)]

    @property
    def loading(self) -> bool:
        return self._turn_lock.locked()

    def history(self) -> list[ChatTurn]:
        return [m.to_turn() for m in self.messages]

    def send(self, text: str) -> Optional[ChatMessage]:
        """Run one turn. Returns the model's message, or None if the send was refused."""
        if not text.strip():
            return None
        if not self._turn_lock.acquire(blocking=False):
            return None
        try:
            history = self.history()
            self.messages.append(ChatMessage(role="user", content=text))
            self._log("USER_MESSAGE", {"content": text})

            try:
                reply = self._client.send(text, history, self.location)
                message = ChatMessage(role="model", content=reply.text, grounding_urls=reply.urls)
                self._log("MODEL_MESSAGE", {
                    "content": message.content,
                    "grounding_urls": [u.model_dump() for u in message.grounding_urls],
                })
            except Exception as exc:  # noqa: BLE001
                logger.warning("Chat turn failed in %s: %s", self.session_id, exc)
                self._log("CHAT_FAILURE", {"error": str(exc)})
                message = ChatMessage(role="model", content=APOLOGY)

            self.messages.append(message)
            return message
        finally:
            self._turn_lock.release()

    def close(self) -> None:
        """Release this session's journal file handle."""
        if self._journal is not None:
            self._journal.close(self.session_id)

    def _log(self, event_type: str, payload: dict) -> None:
        if self._journal is None:
            return
        try:
            self._journal.log(self.session_id, event_type, payload)
        except OSError as exc:
            logger.warning("Journal write failed for %s (%s): %s", self.session_id, event_type, exc)
