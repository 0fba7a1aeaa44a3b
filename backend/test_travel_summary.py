"""
Tests for modules/assistant/travel_summary.py.
The google-genai client is replaced with a MagicMock.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import config
import llm
from modules.assistant.travel_summary import TravelSummaryClient, build_prompt


def test_prompt_mentions_name_and_introduction():
    prompt = build_prompt("象山親山步道", "登頂可俯瞰台北101")
    assert '"象山親山步道"' in prompt
    assert "登頂可俯瞰台北101" in prompt
    assert "Traditional Chinese" in prompt


def test_summarize_returns_generated_text_with_sampling_config():
    fake = MagicMock()
    fake.models.generate_content.return_value = MagicMock(text="必訪！夜景超美。")

    result = TravelSummaryClient(client=fake).summarize("象山", "hiking")

    assert result == "必訪！夜景超美。"
    kwargs = fake.models.generate_content.call_args.kwargs
    assert kwargs["model"] == config.SUMMARY_MODEL_NAME
    assert "象山" in kwargs["contents"]
    assert kwargs["config"].temperature == config.SUMMARY_TEMPERATURE
    assert kwargs["config"].top_p == config.SUMMARY_TOP_P


def test_model_can_be_overridden():
    fake = MagicMock()
    fake.models.generate_content.return_value = MagicMock(text="ok")

    TravelSummaryClient(client=fake, model="gemini-test").summarize("A", "B")

    assert fake.models.generate_content.call_args.kwargs["model"] == "gemini-test"


def test_backend_error_returns_none():
    fake = MagicMock()
    fake.models.generate_content.side_effect = RuntimeError("429 RESOURCE_EXHAUSTED")

    assert TravelSummaryClient(client=fake).summarize("象山", "hiking") is None


def test_client_construction_failure_returns_none(monkeypatch):
    def _boom():
        raise ValueError("Missing key inputs argument")

    monkeypatch.setattr(llm, "get_client", _boom)

    assert TravelSummaryClient().summarize("象山", "hiking") is None
