"""
Tests for main.py command dispatch (terminal browser).
"""

from __future__ import annotations

import pytest

from conftest import FakeRepository, FakeSummaryClient
from main import dispatch
from modules.session import BrowseSession, ChatSession
from schemas import ChatReply, GroundingUrl


class _EchoChatClient:
    def send(self, message, history, location=None):
        return ChatReply(text=f"echo: {message}", urls=[GroundingUrl(title="T", uri="https://t.example/")])


@pytest.fixture
def browse(scenario_collection):
    session = BrowseSession(FakeRepository(scenario_collection), FakeSummaryClient())
    session.refresh()
    return session


@pytest.fixture
def chat():
    return ChatSession(_EchoChatClient())


def test_quit_commands_stop_the_loop(browse, chat):
    for cmd in ("quit", "q", "EXIT"):
        assert dispatch(cmd, browse, chat) is False
    assert dispatch("", browse, chat) is True


def test_category_and_search_commands_update_list(browse, chat, capsys):
    dispatch("category 自然風景", browse, chat)
    out = capsys.readouterr().out
    assert "Elephant Mountain" in out
    assert "National Palace Museum" not in out

    dispatch("category", browse, chat)
    dispatch("search art", browse, chat)
    out = capsys.readouterr().out
    assert "National Palace Museum" in out
    assert browse.criteria.category == "全部"


def test_empty_result_message(browse, chat, capsys):
    dispatch("search nothing-matches", browse, chat)
    assert "找不到相關景點" in capsys.readouterr().out


def test_show_prints_detail_and_summary(browse, chat, capsys):
    dispatch("show 1", browse, chat)
    out = capsys.readouterr().out
    assert "Elephant Mountain" in out
    assert "推薦必訪！" in out
    assert "https://www.google.com/maps/search/" in out
    assert browse.selected is None


def test_show_rejects_bad_ids(browse, chat, capsys):
    dispatch("show abc", browse, chat)
    dispatch("show 42", browse, chat)
    out = capsys.readouterr().out
    assert "Usage: show <id>" in out
    assert "No attraction with id 42" in out


def test_fetch_error_is_reported(scenario_collection, chat, capsys):
    browse = BrowseSession(FakeRepository(scenario_collection, error="HTTP Error: 503"), FakeSummaryClient())
    dispatch("refresh", browse, chat)
    assert "HTTP Error: 503" in capsys.readouterr().out


def test_ask_prints_reply_and_citations(browse, chat, capsys):
    dispatch("ask 士林夜市怎麼去？", browse, chat)
    out = capsys.readouterr().out
    assert "echo: 士林夜市怎麼去？" in out
    assert "https://t.example/" in out
    assert len(chat.messages) == 3


def test_unknown_command(browse, chat, capsys):
    assert dispatch("dance", browse, chat) is True
    assert "Unknown command" in capsys.readouterr().out
