"""
modules/validation/ingestion_validator.py
------------------------------------------
Data-quality guards applied to raw attraction records from the Taipei
open-data feed before they are parsed into ``Attraction`` models.

  Attraction:
    ✓ Record is a JSON object
    ✓ id present and integer-like
    ✓ Non-empty name

Missing images, categories, phone numbers, sites, opening hours or
coordinates are NOT errors; those degrade to display fallbacks.

Usage:
    from modules.validation import validate_attraction, filter_valid

    clean_records = filter_valid(payload["data"], validate_attraction)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable

logger = logging.getLogger(__name__)


# ── Result dataclass ───────────────────────────────────────────────────────────

@dataclass
class ValidationResult:
    """
    Outcome of a single validation run.

    Attributes:
        valid:  True iff there are zero errors.
        errors: Human-readable list of failure reasons.
        record: The input record (for logging purposes).
    """
    valid: bool
    errors: list[str] = field(default_factory=list)
    record: Any = field(default=None, repr=False)

    def __bool__(self) -> bool:
        return self.valid


# ── Attraction validation ──────────────────────────────────────────────────────

def validate_attraction(record: Any) -> ValidationResult:
    """Validate one raw attraction record from the open-data feed."""
    if not isinstance(record, dict):
        return ValidationResult(
            valid=False,
            errors=[f"record must be a JSON object (got {type(record).__name__})"],
            record=record,
        )

    errors: list[str] = []

    # ── Identity ───────────────────────────────────────────────────────────
    rid = record.get("id")
    if rid is None or isinstance(rid, bool):
        errors.append(f"id must be an integer (got {rid!r})")
    else:
        try:
            int(rid)
        except (TypeError, ValueError):
            errors.append(f"id={rid!r} must be an integer")

    # ── Name ───────────────────────────────────────────────────────────────
    name = record.get("name")
    if not isinstance(name, str) or not name.strip():
        errors.append("name must not be empty or NULL")

    return ValidationResult(valid=len(errors) == 0, errors=errors, record=record)


# ── Batch filter helper ────────────────────────────────────────────────────────

def filter_valid(
    items: list[Any],
    validator: Callable[[Any], ValidationResult],
    log: bool = True,
) -> list[Any]:
    """
    Apply a validator to every item in a list, return only the valid ones.

    Order of the surviving items is preserved and duplicates are kept.
    """
    valid_items: list[Any] = []
    rejected = 0

    for item in items:
        result = validator(item)
        if result.valid:
            valid_items.append(item)
        else:
            rejected += 1
            if log:
                name = item.get("name", "?") if isinstance(item, dict) else "?"
                logger.warning("Rejected record %r: %s", name, "; ".join(result.errors))

    if log and rejected:
        logger.warning(
            "%d/%d records rejected; %d passed.", rejected, len(items), len(valid_items)
        )

    return valid_items
