"""
modules/tool_usage/attraction_tool.py
--------------------------------------
Fetches the Taipei attractions dataset from the city's open-data API.

Real API:  GET https://www.travel.taipei/open-api/{locale}/Attractions/All?page=1
Relay:     GET https://corsproxy.io/?{url-encoded target}
Headers:   Accept: application/json
Response:  {"total": int, "data": [Attraction, ...]}

Only page 1 is fetched. Records keep upstream order and are not
de-duplicated by id.

Stub mode: set USE_STUB_ATTRACTIONS=true to return a small hardcoded
           Taipei dataset for offline use.
"""

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import requests
from pydantic import ValidationError

import config
from modules.validation import filter_valid, validate_attraction
from schemas import Attraction, AttractionsResponse

logger = logging.getLogger(__name__)

# Immutable, upstream-ordered result of one fetch.
AttractionCollection = tuple[Attraction, ...]

UNKNOWN_CONNECTION_ERROR = "連線至 API 時發生未知錯誤"


class FetchError(RuntimeError):
    """Network, HTTP or payload failure while fetching the attractions feed."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def upstream_url(page: int | None = None) -> str:
    """Return the open-data endpoint for the configured locale and page."""
    page = config.ATTRACTIONS_PAGE if page is None else page
    base = config.ATTRACTIONS_API_BASE.rstrip("/")
    return f"{base}/{config.ATTRACTIONS_LOCALE}/Attractions/All?page={page}"


def relay_url(target: str) -> str:
    """Wrap *target* for the CORS relay: the whole URL goes in the query string."""
    return config.CORS_PROXY_URL + quote(target, safe="")


def parse_attractions(payload: Any) -> AttractionCollection:
    """Turn a decoded ``{total, data}`` body into an AttractionCollection.

    A missing or null ``data`` key yields an empty collection. Records that
    fail validation are skipped; the rest keep upstream order.
    """
    if not isinstance(payload, dict):
        raise FetchError(
            f"Unexpected response payload: expected a JSON object, got {type(payload).__name__}"
        )
    try:
        envelope = AttractionsResponse.model_validate(payload)
    except ValidationError as exc:
        raise FetchError(f"Unexpected response payload: {exc.error_count()} invalid field(s)") from exc

    records: list[Attraction] = []
    for raw in filter_valid(envelope.data or [], validate_attraction):
        try:
            records.append(Attraction.model_validate(raw))
        except ValidationError as exc:
            logger.warning("Skipping attraction %r: %s", raw.get("name"), exc)
    return tuple(records)


class AttractionRepository:
    """Fetches attraction records from the Taipei open-data API or the stub dataset."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self._session = session or requests.Session()

    @property
    def url(self) -> str:
        target = upstream_url()
        return relay_url(target) if config.USE_CORS_PROXY else target

    def fetch_all(self) -> AttractionCollection:
        """Fetch page 1 of the dataset in a single request.

        Raises FetchError on network failure, non-2xx status or a malformed
        body. No retry; callers re-invoke to retry.
        """
        if config.USE_STUB_ATTRACTIONS:
            records = parse_attractions({"total": len(_STUB_DATA), "data": _STUB_DATA})
            logger.info("Returning stub attraction data (%d records)", len(records))
            return records

        url = self.url
        try:
            resp = self._session.get(
                url,
                headers={"Accept": "application/json"},
                timeout=config.ATTRACTIONS_REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            logger.error("Attractions request failed: %s", exc)
            raise FetchError(str(exc) or UNKNOWN_CONNECTION_ERROR) from exc

        if not 200 <= resp.status_code < 300:
            logger.error("Attractions API returned HTTP %s", resp.status_code)
            raise FetchError(f"HTTP Error: {resp.status_code}", status_code=resp.status_code)

        try:
            payload = resp.json()
        except ValueError as exc:
            logger.error("Attractions API returned a malformed body: %s", exc)
            raise FetchError(str(exc) or UNKNOWN_CONNECTION_ERROR) from exc

        records = parse_attractions(payload)
        logger.info("Fetched %d attractions from %s", len(records), url)
        return records


# ---------------------------------------------------------------------------
# Stub dataset (shape matches the live feed)
# ---------------------------------------------------------------------------

def _r(rid, name, cat_id, cat_name, address, intro, open_time="", tel="", site="", img=""):
    """Convenience builder for stub rows."""
    return {
        "id": rid,
        "name": name,
        "introduction": intro,
        "open_time": open_time,
        "address": address,
        "tel": tel,
        "official_site": site,
        "category": [{"id": cat_id, "name": cat_name}],
        "images": [{"src": img, "subject": name, "ext": ".jpg"}] if img else [],
    }


_STUB_DATA: list[dict] = [
    _r(1, "象山親山步道", 12, "自然風景", "110 臺北市信義區信義路5段150巷342弄",
       "象山步道是台北最受歡迎的登山步道之一，登頂可俯瞰台北101與信義區夜景。",
       open_time="全天開放"),
    _r(2, "國立故宮博物院", 25, "藝文館所", "111 臺北市士林區至善路2段221號",
       "收藏近七十萬件中華文物，翠玉白菜與肉形石為鎮館之寶。",
       open_time="09:00-17:00", tel="+886-2-28812021", site="https://www.npm.gov.tw/"),
    _r(3, "艋舺龍山寺", 14, "宗教信仰", "108 臺北市萬華區廣州街211號",
       "創建於1738年，是台北最古老的寺廟之一，供奉觀世音菩薩。",
       open_time="06:00-22:00", tel="+886-2-23025162", site="https://www.lungshan.org.tw/"),
    _r(4, "國立中正紀念堂", 13, "歷史建築", "100 臺北市中正區中山南路21號",
       "白色建築搭配藍色琉璃瓦，衛兵交接儀式吸引大量遊客。",
       open_time="09:00-18:00", tel="+886-2-23431100"),
    _r(5, "北投溫泉博物館", 13, "歷史建築", "112 臺北市北投區中山路2號",
       "前身為北投公共浴場，是日治時期東亞規模最大的公共浴場。",
       open_time="10:00-18:00"),
    _r(6, "陽明山國家公園", 12, "自然風景", "112 臺北市北投區竹子湖路1-20號",
       "火山地形、溫泉與季節花海，春季海芋與櫻花最為知名。"),
]
