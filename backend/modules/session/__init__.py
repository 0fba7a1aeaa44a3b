"""
modules/session package: explicit browse and chat state.
"""
from modules.session.browse_state import BrowseSession, SummaryRequest
from modules.session.chat_session import APOLOGY, GREETING, ChatSession

__all__ = [
    "BrowseSession",
    "SummaryRequest",
    "ChatSession",
    "GREETING",
    "APOLOGY",
]
