"""
modules/planning/attraction_filter.py
--------------------------------------
Pure search + category filter over an AttractionCollection.

A record passes when BOTH hold:
  1. search_text is a case-insensitive substring of name or introduction
     (empty search_text always matches).
  2. category is the ALL sentinel ("全部"), or some category entry's name
     contains it (case-sensitive; labels come from a fixed vocabulary).

Input order is preserved. No I/O, no state.
"""

from __future__ import annotations

from typing import Iterable

import config
from schemas import Attraction, FilterCriteria

ALL_CATEGORY = config.ALL_CATEGORY


def matches_text(record: Attraction, search_text: str) -> bool:
    if not search_text:
        return True
    needle = search_text.lower()
    return needle in record.name.lower() or needle in record.introduction.lower()


def matches_category(record: Attraction, category: str) -> bool:
    if category == ALL_CATEGORY:
        return True
    return any(category in c.name for c in record.category)


def apply(collection: Iterable[Attraction], criteria: FilterCriteria) -> tuple[Attraction, ...]:
    """Return the records of *collection* matching *criteria*, in input order."""
    return tuple(
        record for record in collection
        if matches_text(record, criteria.search_text)
        and matches_category(record, criteria.category)
    )
