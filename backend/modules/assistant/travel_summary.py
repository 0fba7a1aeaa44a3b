"""
modules/assistant/travel_summary.py
------------------------------------
TravelSummaryClient: one-shot Gemini call producing a short promotional
blurb for a single attraction.

Best-effort: any failure is logged and returned as ``None`` so callers can
show a fallback string instead of the summary.
"""

from __future__ import annotations

import logging
from typing import Optional

from google.genai import types as genai_types

import config
import llm

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = (
    'You are a local Taipei travel expert. Provide a concise (under 100 words), '
    'engaging travel tip and summary for the following attraction: "{name}". '
    'Here is the official intro: {introduction}. '
    'Focus on what makes it unique and a "must-do" activity there. '
    'Answer in Traditional Chinese.'
)


def build_prompt(name: str, introduction: str) -> str:
    return SUMMARY_PROMPT.format(name=name, introduction=introduction)


class TravelSummaryClient:

    def __init__(self, client=None, model: str | None = None) -> None:
        # client is a google.genai.Client; built lazily from config when omitted
        self._client = client
        self._model = model or config.SUMMARY_MODEL_NAME

    def summarize(self, name: str, introduction: str) -> Optional[str]:
        """Return the generated summary text, or None if it is unavailable."""
        try:
            client = self._client or llm.get_client()
            response = client.models.generate_content(
                model=self._model,
                contents=build_prompt(name, introduction),
                config=genai_types.GenerateContentConfig(
                    temperature=config.SUMMARY_TEMPERATURE,
                    top_p=config.SUMMARY_TOP_P,
                ),
            )
            return response.text
        except Exception as exc:
            logger.error("Gemini summary error for %r: %s", name, exc)
            return None
