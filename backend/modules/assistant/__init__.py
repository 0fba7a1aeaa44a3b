"""
modules/assistant package: Gemini-backed summary and chat clients.
"""
from modules.assistant.travel_summary import TravelSummaryClient
from modules.assistant.chat_client import (
    AssistantChatClient,
    GeneralSearch,
    GeneralSearchWithLocation,
    SearchToolset,
    toolset_for,
)

__all__ = [
    "TravelSummaryClient",
    "AssistantChatClient",
    "GeneralSearch",
    "GeneralSearchWithLocation",
    "SearchToolset",
    "toolset_for",
]
