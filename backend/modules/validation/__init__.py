"""
modules/validation package: data quality guards for ingested records.
"""
from modules.validation.ingestion_validator import (
    ValidationResult,
    validate_attraction,
    filter_valid,
)

__all__ = [
    "ValidationResult",
    "validate_attraction",
    "filter_valid",
]
