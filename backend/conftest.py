"""
Shared fixtures: attraction builders, fake repository / Gemini responses.
No network access: every external collaborator is replaced.
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import Optional

import pytest

import config
from modules.tool_usage.attraction_tool import FetchError
from schemas import Attraction


@pytest.fixture(autouse=True)
def _offline_config(monkeypatch):
    monkeypatch.setattr(config, "USE_STUB_ATTRACTIONS", False)
    monkeypatch.setattr(config, "USE_CORS_PROXY", True)
    monkeypatch.setattr(config, "EVENT_LOG_ENABLED", False)


def make_attraction(rid: int, name: str, introduction: str = "", categories=(), **extra) -> Attraction:
    return Attraction.model_validate({
        "id": rid,
        "name": name,
        "introduction": introduction,
        "category": [{"id": i, "name": c} for i, c in enumerate(categories, start=1)],
        **extra,
    })


@pytest.fixture
def scenario_collection() -> tuple[Attraction, ...]:
    return (
        make_attraction(1, "Elephant Mountain", "hiking", ["自然風景"]),
        make_attraction(2, "National Palace Museum", "art", ["藝文館所"]),
    )


class FakeRepository:
    """Stands in for AttractionRepository; raises *error* when set."""

    def __init__(self, records=(), error: Optional[str] = None) -> None:
        self.records = tuple(records)
        self.error = error
        self.calls = 0

    def fetch_all(self):
        self.calls += 1
        if self.error is not None:
            raise FetchError(self.error)
        return self.records


class FakeSummaryClient:
    def __init__(self, text: Optional[str] = "推薦必訪！") -> None:
        self.text = text
        self.calls: list[tuple[str, str]] = []

    def summarize(self, name: str, introduction: str) -> Optional[str]:
        self.calls.append((name, introduction))
        return self.text


def gemini_response(text: str = "", chunks=()):
    """Build an object shaped like google.genai GenerateContentResponse."""
    metadata = SimpleNamespace(grounding_chunks=list(chunks))
    return SimpleNamespace(
        text=text,
        candidates=[SimpleNamespace(grounding_metadata=metadata)],
    )


def web_chunk(title: str, uri: str):
    return SimpleNamespace(web=SimpleNamespace(title=title, uri=uri), maps=None)


def maps_chunk(title: str, uri: str):
    return SimpleNamespace(web=None, maps=SimpleNamespace(title=title, uri=uri))
