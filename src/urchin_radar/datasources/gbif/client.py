"""
GBIF occurrence-search client constants and request building.

API docs: https://techdocs.gbif.org/en/openapi/v1/occurrence#/Searching%20occurrences
No API key; pages are capped at 300 results.
"""

from __future__ import annotations

from datetime import date
from typing import Any

# ---------------------------------------------------------------------------
# API configuration
# ---------------------------------------------------------------------------
OCCURRENCE_SEARCH_URL = "https://api.gbif.org/v1/occurrence/search"
PAGE_LIMIT = 300  # API maximum per page
YEARS_BACK = 5
MAX_PER_SPECIES = 2000  # safety cap on records per species


class FetchError(RuntimeError):
    """GBIF answered with a non-success status."""

    def __init__(self, status: int, reason: str) -> None:
        self.status = status
        self.reason = reason
        super().__init__(f"GBIF request failed ({status}): {reason}")


def year_window(
    current_year: int | None = None,
    lookback_years: int = YEARS_BACK,
) -> tuple[int, int]:
    """Inclusive ``(start, end)`` year range ending at ``current_year``.

    ``current_year`` defaults to today's year, read on every call.
    """
    end = current_year if current_year is not None else date.today().year
    return end - lookback_years, end


def build_query(
    scientific_name: str,
    offset: int,
    years: tuple[int, int],
    limit: int = PAGE_LIMIT,
) -> dict[str, Any]:
    """Query parameters for one page of the occurrence search."""
    start, end = years
    return {
        "scientificName": scientific_name,
        "hasCoordinate": "true",
        "year": f"{start},{end}",
        "limit": limit,
        "offset": offset,
    }
