"""
Tests for modules/tool_usage/attraction_tool.py.
The HTTP session is a MagicMock; nothing leaves the process.
"""

from __future__ import annotations

from unittest.mock import MagicMock
from urllib.parse import unquote

import pytest
import requests

import config
from modules.tool_usage.attraction_tool import (
    UNKNOWN_CONNECTION_ERROR,
    AttractionRepository,
    FetchError,
    parse_attractions,
    relay_url,
    upstream_url,
)


def _response(status: int = 200, payload=None, json_error: Exception | None = None):
    resp = MagicMock()
    resp.status_code = status
    if json_error is not None:
        resp.json.side_effect = json_error
    else:
        resp.json.return_value = payload
    return resp


def _repo(resp=None, error: Exception | None = None):
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = resp
    return AttractionRepository(session=session), session


def _row(rid, name, category="自然風景"):
    return {"id": rid, "name": name, "introduction": "", "category": [{"id": 1, "name": category}]}


# ── URLs ──────────────────────────────────────────────────────────────────────

def test_upstream_url_targets_zh_tw_page_one():
    assert upstream_url() == "https://www.travel.taipei/open-api/zh-tw/Attractions/All?page=1"


def test_relay_url_encodes_whole_target():
    target = upstream_url()
    wrapped = relay_url(target)
    assert wrapped.startswith(config.CORS_PROXY_URL)
    encoded = wrapped[len(config.CORS_PROXY_URL):]
    assert "/" not in encoded and "?" not in encoded and "=" not in encoded
    assert unquote(encoded) == target


def test_direct_url_when_relay_disabled(monkeypatch):
    monkeypatch.setattr(config, "USE_CORS_PROXY", False)
    repo, _ = _repo(_response())
    assert repo.url == upstream_url()


# ── fetch_all ─────────────────────────────────────────────────────────────────

def test_fetch_sends_single_get_with_accept_header():
    repo, session = _repo(_response(payload={"total": 1, "data": [_row(1, "象山")]}))
    repo.fetch_all()

    session.get.assert_called_once()
    args, kwargs = session.get.call_args
    assert args[0] == relay_url(upstream_url())
    assert kwargs["headers"] == {"Accept": "application/json"}
    assert kwargs["timeout"] == config.ATTRACTIONS_REQUEST_TIMEOUT


def test_fetch_success_keeps_order_and_duplicates():
    rows = [_row(5, "B"), _row(1, "A"), _row(5, "B again")]
    repo, _ = _repo(_response(payload={"total": 3, "data": rows}))

    result = repo.fetch_all()

    assert isinstance(result, tuple)
    assert [a.id for a in result] == [5, 1, 5]
    assert [a.name for a in result] == ["B", "A", "B again"]
    assert result[0].category[0].name == "自然風景"


@pytest.mark.parametrize("payload", [{}, {"total": 0, "data": None}, {"total": 0, "data": []}])
def test_missing_or_null_data_is_empty(payload):
    repo, _ = _repo(_response(payload=payload))
    assert repo.fetch_all() == ()


def test_http_error_status_in_message():
    repo, _ = _repo(_response(status=500))
    with pytest.raises(FetchError) as excinfo:
        repo.fetch_all()
    assert "500" in str(excinfo.value)
    assert excinfo.value.status_code == 500


def test_redirect_status_is_a_failure():
    repo, _ = _repo(_response(status=304))
    with pytest.raises(FetchError, match="HTTP Error: 304"):
        repo.fetch_all()


def test_network_error_message_is_propagated():
    repo, _ = _repo(error=requests.ConnectionError("Name or service not known"))
    with pytest.raises(FetchError, match="Name or service not known"):
        repo.fetch_all()


def test_network_error_without_message_uses_generic_text():
    repo, _ = _repo(error=requests.Timeout())
    with pytest.raises(FetchError) as excinfo:
        repo.fetch_all()
    assert str(excinfo.value) == UNKNOWN_CONNECTION_ERROR


def test_malformed_json_is_a_fetch_error():
    repo, _ = _repo(_response(json_error=ValueError("Expecting value: line 1 column 1")))
    with pytest.raises(FetchError, match="Expecting value"):
        repo.fetch_all()


def test_non_object_payload_is_a_fetch_error():
    repo, _ = _repo(_response(payload=["not", "an", "envelope"]))
    with pytest.raises(FetchError, match="Unexpected response payload"):
        repo.fetch_all()


def test_stub_mode_makes_no_request(monkeypatch):
    monkeypatch.setattr(config, "USE_STUB_ATTRACTIONS", True)
    repo, session = _repo(_response())

    result = repo.fetch_all()

    session.get.assert_not_called()
    assert len(result) >= 5
    assert all(a.name for a in result)


# ── parse_attractions ─────────────────────────────────────────────────────────

def test_invalid_records_are_skipped():
    payload = {"data": [
        _row(1, "ok"),
        {"name": "missing id"},
        {"id": 2, "name": ""},
        "not a dict",
        _row(4, "also ok"),
    ]}
    assert [a.id for a in parse_attractions(payload)] == [1, 4]


def test_out_of_range_coordinates_do_not_drop_the_record():
    payload = {"data": [
        _row(1, "first"),
        {"id": 2, "name": "bad coords", "nlat": 200, "elong": -999},
        _row(3, "last"),
    ]}
    result = parse_attractions(payload)
    assert [a.id for a in result] == [1, 2, 3]
    assert result[1].nlat == 200


def test_null_fields_become_empty_values():
    payload = {"data": [{
        "id": 7, "name": "Null-heavy", "introduction": None, "address": None,
        "category": None, "images": None, "nlat": None, "elong": None,
    }]}
    (a,) = parse_attractions(payload)
    assert a.introduction == ""
    assert a.category == [] and a.images == []
    assert a.primary_category == config.DEFAULT_CATEGORY_LABEL
    assert a.cover_image == config.DEFAULT_COVER_IMAGE
    assert a.teaser == config.DEFAULT_INTRODUCTION


def test_map_search_url_encodes_name_and_address():
    (a,) = parse_attractions({"data": [{"id": 1, "name": "象山", "address": "信義區 A&B"}]})
    assert a.map_search_url.startswith("https://www.google.com/maps/search/?api=1&query=")
    assert "&B" not in a.map_search_url.split("query=", 1)[1]
    assert unquote(a.map_search_url.split("query=", 1)[1]) == "象山 信義區 A&B"
