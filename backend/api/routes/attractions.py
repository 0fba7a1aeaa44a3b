"""
api/routes/attractions.py
-------------------------
Browsing endpoints over the Taipei attractions dataset.

  GET  /v1/attractions                 ?q=<text>&category=<label>
  GET  /v1/attractions/categories
  POST /v1/attractions/refresh         (manual retry after a fetch error)
  GET  /v1/attractions/{id}
  GET  /v1/attractions/{id}/summary    (AI travel tip, fallback text if unavailable)

The collection is fetched on first use and kept in memory until refreshed.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

import config
from modules.assistant.travel_summary import TravelSummaryClient
from modules.observability.logger import default_logger
from modules.planning import attraction_filter
from modules.session.browse_state import BrowseSession
from modules.tool_usage.attraction_tool import AttractionRepository
from schemas import Attraction, FilterCriteria

router = APIRouter()

# ── In-memory catalog ──────────────────────────────────────────────────────────
_catalog: Optional[BrowseSession] = None
_summary_client: Optional[TravelSummaryClient] = None


def get_catalog() -> BrowseSession:
    global _catalog
    if _catalog is None:
        _catalog = BrowseSession(
            AttractionRepository(), get_summary_client(), journal=default_logger()
        )
    return _catalog


def get_summary_client() -> TravelSummaryClient:
    global _summary_client
    if _summary_client is None:
        _summary_client = TravelSummaryClient()
    return _summary_client


# ── Serialisers ────────────────────────────────────────────────────────────────

def _ser_card(a: Attraction) -> dict:
    return {
        "id":               a.id,
        "name":             a.name,
        "primary_category": a.primary_category,
        "cover_image":      a.cover_image,
        "teaser":           a.teaser,
        "address":          a.address,
    }


def _ser_detail(a: Attraction) -> dict:
    return {
        **a.model_dump(),
        "primary_category": a.primary_category,
        "cover_image":      a.cover_image,
        "map_search_url":   a.map_search_url,
    }


def _loaded(catalog: BrowseSession) -> BrowseSession:
    # The error state holds until POST /refresh succeeds.
    catalog.ensure_loaded()
    if catalog.error is not None:
        raise HTTPException(status_code=502, detail=catalog.error)
    return catalog


def _lookup(catalog: BrowseSession, attraction_id: int) -> Attraction:
    attraction = _loaded(catalog).find(attraction_id)
    if attraction is None:
        raise HTTPException(status_code=404, detail=f"Attraction {attraction_id} not found")
    return attraction


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.get("", summary="Search and filter attractions")
def list_attractions(
    q: str = Query("", description="Free text matched against name and introduction"),
    category: str = Query(config.ALL_CATEGORY, description="Category label or 全部"),
    catalog: BrowseSession = Depends(get_catalog),
) -> dict:
    catalog = _loaded(catalog)
    results = attraction_filter.apply(
        catalog.attractions, FilterCriteria(search_text=q, category=category)
    )
    return {
        "count": len(results),
        "total": len(catalog.attractions),
        "items": [_ser_card(a) for a in results],
    }


@router.get("/categories", summary="Category filter vocabulary")
def list_categories() -> dict:
    return {"categories": config.CATEGORIES, "all": config.ALL_CATEGORY}


@router.post("/refresh", summary="Fetch the dataset again")
def refresh(catalog: BrowseSession = Depends(get_catalog)) -> dict:
    if not catalog.refresh():
        raise HTTPException(status_code=502, detail=catalog.error)
    return {"total": len(catalog.attractions)}


@router.get("/{attraction_id}", summary="Attraction detail")
def get_attraction(attraction_id: int, catalog: BrowseSession = Depends(get_catalog)) -> dict:
    return _ser_detail(_lookup(catalog, attraction_id))


@router.get("/{attraction_id}/summary", summary="AI travel tip for one attraction")
def get_summary(
    attraction_id: int,
    catalog: BrowseSession = Depends(get_catalog),
    client: TravelSummaryClient = Depends(get_summary_client),
) -> dict:
    attraction = _lookup(catalog, attraction_id)
    text = client.summarize(attraction.name, attraction.introduction)
    return {
        "attraction_id": attraction.id,
        "available":     text is not None,
        "summary":       text if text is not None else config.SUMMARY_FALLBACK_TEXT,
    }
