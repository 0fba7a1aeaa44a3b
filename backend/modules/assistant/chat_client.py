"""
modules/assistant/chat_client.py
---------------------------------
AssistantChatClient: multi-turn Gemini conversation grounded with search.

Every turn opens a chat pre-configured with:
  - the Taipei travel-expert system instruction
  - Google Search retrieval (always)
  - Google Maps retrieval + the user's lat/lng (only when a location is known)

and sends the new message on top of the full prior history.

Grounding citations are read from
``candidates[0].grounding_metadata.grounding_chunks``; each chunk is either
web- or maps-shaped and is normalised to ``GroundingUrl(title, uri)``.

Failures are logged and re-raised: the caller decides what the user sees.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from google.genai import types as genai_types

import config
import llm
from schemas import ChatReply, ChatTurn, GeoPosition, GroundingUrl

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "你是一位熱愛台北的旅遊專家。你可以回答關於台北景點、交通、美食、天氣或活動的問題。"
    "如果需要，請利用搜尋功能提供最新的資訊。回答請使用繁體中文，語氣活潑親切。"
)


# ── Search toolsets ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GeneralSearch:
    """Web search only."""

    def tools(self) -> list[genai_types.Tool]:
        return [genai_types.Tool(google_search=genai_types.GoogleSearch())]

    def tool_config(self) -> Optional[genai_types.ToolConfig]:
        return None


@dataclass(frozen=True)
class GeneralSearchWithLocation:
    """Web search plus maps search anchored at the user's position."""
    position: GeoPosition

    def tools(self) -> list[genai_types.Tool]:
        return [
            genai_types.Tool(google_search=genai_types.GoogleSearch()),
            genai_types.Tool(google_maps=genai_types.GoogleMaps()),
        ]

    def tool_config(self) -> Optional[genai_types.ToolConfig]:
        return genai_types.ToolConfig(
            retrieval_config=genai_types.RetrievalConfig(
                lat_lng=genai_types.LatLng(
                    latitude=self.position.lat,
                    longitude=self.position.lng,
                )
            )
        )


SearchToolset = Union[GeneralSearch, GeneralSearchWithLocation]


def toolset_for(location: Optional[GeoPosition]) -> SearchToolset:
    if location is None:
        return GeneralSearch()
    return GeneralSearchWithLocation(location)


def build_chat_config(toolset: SearchToolset) -> genai_types.GenerateContentConfig:
    return genai_types.GenerateContentConfig(
        system_instruction=SYSTEM_INSTRUCTION,
        tools=toolset.tools(),
        tool_config=toolset.tool_config(),
    )


def to_contents(history: Sequence[ChatTurn]) -> list[genai_types.Content]:
    return [
        genai_types.Content(
            role=turn.role,
            parts=[genai_types.Part(text=part.text) for part in turn.parts],
        )
        for turn in history
    ]


def extract_grounding_urls(response) -> list[GroundingUrl]:
    """Map grounding chunks to citations; chunks with no web/maps source are dropped."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    urls: list[GroundingUrl] = []
    for chunk in chunks:
        source = getattr(chunk, "web", None) or getattr(chunk, "maps", None)
        if source is None:
            continue
        urls.append(GroundingUrl(title=source.title or "", uri=source.uri or ""))
    return urls


class AssistantChatClient:

    def __init__(self, client=None, model: str | None = None) -> None:
        self._client = client
        self._model = model or config.CHAT_MODEL_NAME

    def send(
        self,
        message: str,
        history: Sequence[ChatTurn],
        location: Optional[GeoPosition] = None,
    ) -> ChatReply:
        """Send *message* after *history*; returns the answer and its citations."""
        try:
            client = self._client or llm.get_client()
            chat = client.chats.create(
                model=self._model,
                config=build_chat_config(toolset_for(location)),
                history=to_contents(history),
            )
            response = chat.send_message(message)
            return ChatReply(
                text=response.text or "",
                urls=extract_grounding_urls(response),
            )
        except Exception as exc:
            logger.error("Gemini chat error: %s", exc)
            raise
