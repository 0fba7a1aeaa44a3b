"""
modules/session/browse_state.py
--------------------------------
BrowseSession: explicit state for browsing the attractions dataset.

Single source of truth for:
  - the current AttractionCollection (replaced wholesale on every refresh)
  - loading / error flags of the last fetch
  - the active FilterCriteria
  - the selected attraction and its AI summary panel

State is changed only through the methods below.

Summary requests are tagged with the id of the attraction they were issued
for. A response whose tag no longer matches the selected attraction is
dropped, so a slow summary for A can never overwrite the panel for B.

Lifecycle:
    session = BrowseSession(AttractionRepository(), TravelSummaryClient())
    session.refresh()
    session.set_category("自然風景")
    for attraction in session.visible(): ...

    request = session.open_detail(attraction)
    session.load_summary(request)
    print(session.summary_text)
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Optional

import config
from modules.observability.logger import StructuredLogger
from modules.planning import attraction_filter
from modules.tool_usage.attraction_tool import (
    AttractionCollection,
    AttractionRepository,
    FetchError,
)
from modules.assistant.travel_summary import TravelSummaryClient
from schemas import Attraction, FilterCriteria

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SummaryRequest:
    """Tag for one in-flight summary call."""
    attraction_id: int
    name: str
    introduction: str


class BrowseSession:

    def __init__(
        self,
        repository: AttractionRepository,
        summary_client: TravelSummaryClient,
        journal: StructuredLogger | None = None,
        session_id: str | None = None,
    ) -> None:
        self._repository = repository
        self._summary_client = summary_client
        self._journal = journal
        self.session_id = session_id or f"browse_{uuid.uuid4().hex[:12]}"
        self._lock = threading.Lock()

        self.attractions: AttractionCollection = ()
        self.loaded: bool = False
        self.attempted: bool = False
        self.loading: bool = False
        self.error: Optional[str] = None
        self.criteria = FilterCriteria()

        self.selected: Optional[Attraction] = None
        self.summary: Optional[str] = None
        self.summary_loading: bool = False

    # ── Fetch ─────────────────────────────────────────────────────────────────

    def refresh(self) -> bool:
        """Fetch the dataset again. Returns False and records the error on failure."""
        with self._lock:
            self.attempted = True
            self.loading = True
            self.error = None
            try:
                self.attractions = self._repository.fetch_all()
                self.loaded = True
                self._log("FETCH_OK", {"count": len(self.attractions)})
                return True
            except FetchError as exc:
                self.error = str(exc)
                self._log("FETCH_FAILED", {"error": self.error})
                return False
            finally:
                self.loading = False

    def ensure_loaded(self) -> bool:
        """Fetch on first use only. Later failures wait for an explicit refresh()."""
        if self.attempted:
            return self.error is None
        return self.refresh()

    # ── Filtering ─────────────────────────────────────────────────────────────

    def set_search_text(self, text: str) -> None:
        self.criteria = self.criteria.model_copy(update={"search_text": text})

    def set_category(self, category: str) -> None:
        self.criteria = self.criteria.model_copy(update={"category": category})

    def visible(self) -> AttractionCollection:
        """Records matching the active criteria; empty while an error is shown."""
        if self.error is not None:
            return ()
        return attraction_filter.apply(self.attractions, self.criteria)

    def find(self, attraction_id: int) -> Optional[Attraction]:
        return next((a for a in self.attractions if a.id == attraction_id), None)

    # ── Detail + summary ──────────────────────────────────────────────────────

    def open_detail(self, attraction: Attraction) -> SummaryRequest:
        self.selected = attraction
        self.summary = None
        self.summary_loading = True
        self._log("DETAIL_OPENED", {"attraction_id": attraction.id, "name": attraction.name})
        return SummaryRequest(attraction.id, attraction.name, attraction.introduction)

    def resolve_summary(self, request: SummaryRequest, text: Optional[str]) -> bool:
        """Apply a summary result; returns False if it is stale and was dropped."""
        if self.selected is None or self.selected.id != request.attraction_id:
            logger.info("Dropping stale summary for attraction %s", request.attraction_id)
            return False
        self.summary = text
        self.summary_loading = False
        self._log("SUMMARY_RESOLVED", {
            "attraction_id": request.attraction_id,
            "available": text is not None,
        })
        return True

    def load_summary(self, request: SummaryRequest) -> bool:
        text = self._summary_client.summarize(request.name, request.introduction)
        return self.resolve_summary(request, text)

    def close_detail(self) -> None:
        self.selected = None
        self.summary = None
        self.summary_loading = False

    @property
    def summary_text(self) -> str:
        return self.summary or config.SUMMARY_FALLBACK_TEXT

    # ── internals ─────────────────────────────────────────────────────────────

    def _log(self, event_type: str, payload: dict) -> None:
        if self._journal is not None:
            self._journal.log(self.session_id, event_type, payload)
