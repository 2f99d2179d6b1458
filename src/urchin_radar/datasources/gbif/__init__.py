"""GBIF occurrence data source.

Fetches recent, coordinate-bearing occurrence records for one species at a
time from the GBIF occurrence-search API, or for a whole catalog at once.

Public API:
  - client: endpoint, paging constants, FetchError, build_query, year_window
  - occurrences: OccurrenceRecord, fetch_occurrences, fetch_occurrences_async,
    fetch_all, fetch_all_settled
"""

from urchin_radar.datasources.gbif.client import (
    MAX_PER_SPECIES,
    OCCURRENCE_SEARCH_URL,
    PAGE_LIMIT,
    YEARS_BACK,
    FetchError,
    build_query,
    year_window,
)
from urchin_radar.datasources.gbif.occurrences import (
    OccurrencePage,
    OccurrenceRecord,
    fetch_all,
    fetch_all_settled,
    fetch_occurrences,
    fetch_occurrences_async,
    parse_occurrence,
    parse_page,
)

__all__ = [
    "MAX_PER_SPECIES",
    "OCCURRENCE_SEARCH_URL",
    "PAGE_LIMIT",
    "YEARS_BACK",
    "FetchError",
    "OccurrencePage",
    "OccurrenceRecord",
    "build_query",
    "fetch_all",
    "fetch_all_settled",
    "fetch_occurrences",
    "fetch_occurrences_async",
    "parse_occurrence",
    "parse_page",
    "year_window",
]
