"""Occurrence fetching and parsing.

Two front ends share the same paging rules:

- ``fetch_occurrences``: blocking, over the shared ``requests`` session.
- ``fetch_occurrences_async``: over ``httpx.AsyncClient``, so ``fetch_all``
  can run every species at once on one event loop.

Paging stops at the record cap, at ``endOfRecords``, or at an empty page.
A page can overshoot the cap; results are truncated to exactly the cap.
"""

from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from urchin_radar.datasources.gbif.client import (
    MAX_PER_SPECIES,
    OCCURRENCE_SEARCH_URL,
    PAGE_LIMIT,
    YEARS_BACK,
    FetchError,
    build_query,
    year_window,
)
from urchin_radar.services.http import create_async_client, session

if TYPE_CHECKING:
    from collections.abc import Iterable

    import httpx

    from urchin_radar.schemas import SpeciesDescriptor

# =============================================================================
# Data Model
# =============================================================================


@dataclass(frozen=True)
class OccurrenceRecord:
    """A single GBIF occurrence with usable coordinates."""

    key: int | None
    lat: float
    lng: float
    year: int | None = None
    country: str | None = None
    state_province: str | None = None


@dataclass
class OccurrencePage:
    """One parsed page of search results."""

    records: list[OccurrenceRecord]
    raw_count: int
    end_of_records: bool

    @property
    def is_last(self) -> bool:
        """No more pages worth requesting."""
        return self.end_of_records or self.raw_count == 0


# =============================================================================
# Parsing
# =============================================================================


def _is_coordinate(value: Any) -> bool:
    # bool is an int subclass; GBIF never sends one as a coordinate
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value)


def parse_occurrence(raw: dict[str, Any]) -> OccurrenceRecord | None:
    """Parse one raw result. Returns None if either coordinate is unusable."""
    lat = raw.get("decimalLatitude")
    lng = raw.get("decimalLongitude")
    if not (_is_coordinate(lat) and _is_coordinate(lng)):
        return None

    return OccurrenceRecord(
        key=raw.get("key"),
        lat=float(lat),
        lng=float(lng),
        year=raw.get("year"),
        country=raw.get("country"),
        state_province=raw.get("stateProvince"),
    )


def parse_page(data: dict[str, Any]) -> OccurrencePage:
    """Parse a search response body into records plus paging state."""
    results = data.get("results")
    raw: list[dict[str, Any]] = results if isinstance(results, list) else []

    records: list[OccurrenceRecord] = []
    for item in raw:
        parsed = parse_occurrence(item) if isinstance(item, dict) else None
        if parsed is not None:
            records.append(parsed)

    return OccurrencePage(
        records=records,
        raw_count=len(raw),
        end_of_records=bool(data.get("endOfRecords")),
    )


def _check_request(scientific_name: str, max_records: int) -> None:
    if not scientific_name:
        msg = "scientific_name must not be empty"
        raise ValueError(msg)
    if max_records < 1:
        msg = f"max_records must be positive, got {max_records}"
        raise ValueError(msg)


# =============================================================================
# API Fetching
# =============================================================================


def fetch_occurrences(
    scientific_name: str,
    max_records: int = MAX_PER_SPECIES,
    *,
    current_year: int | None = None,
    lookback_years: int = YEARS_BACK,
    page_limit: int = PAGE_LIMIT,
) -> list[OccurrenceRecord]:
    """
    Fetch recent occurrences of one species, blocking.

    Args:
        scientific_name: Exact GBIF scientific name.
        max_records: Upper bound on returned records.
        current_year: Last year of the window (default: this year).
        lookback_years: Years before ``current_year`` to include.
        page_limit: Records requested per page (GBIF max 300).

    Returns:
        At most ``max_records`` OccurrenceRecords, in source order.

    Raises:
        FetchError: On the first non-success response.
    """
    _check_request(scientific_name, max_records)
    years = year_window(current_year, lookback_years)

    records: list[OccurrenceRecord] = []
    offset = 0
    while len(records) < max_records:
        params = build_query(scientific_name, offset, years, limit=page_limit)
        resp = session.get(OCCURRENCE_SEARCH_URL, params=params)
        if not resp.ok:
            raise FetchError(resp.status_code, resp.reason)

        page = parse_page(resp.json())
        records.extend(page.records)
        if page.is_last:
            break
        offset += page_limit

    return records[:max_records]


async def fetch_occurrences_async(
    scientific_name: str,
    max_records: int = MAX_PER_SPECIES,
    *,
    client: httpx.AsyncClient | None = None,
    current_year: int | None = None,
    lookback_years: int = YEARS_BACK,
    page_limit: int = PAGE_LIMIT,
    cancel_event: asyncio.Event | None = None,
) -> list[OccurrenceRecord]:
    """
    Fetch recent occurrences of one species without blocking the loop.

    Same contract as ``fetch_occurrences``.  ``cancel_event`` is checked
    before every page request; once set, no further requests are made and
    ``asyncio.CancelledError`` is raised.

    Args:
        client: Client to reuse. A private one is opened and closed if None.
        cancel_event: Cooperative cancellation signal.
    """
    _check_request(scientific_name, max_records)
    if client is None:
        async with create_async_client() as owned:
            return await fetch_occurrences_async(
                scientific_name,
                max_records,
                client=owned,
                current_year=current_year,
                lookback_years=lookback_years,
                page_limit=page_limit,
                cancel_event=cancel_event,
            )

    years = year_window(current_year, lookback_years)
    records: list[OccurrenceRecord] = []
    offset = 0
    while len(records) < max_records:
        if cancel_event is not None and cancel_event.is_set():
            msg = f"fetch of {scientific_name!r} cancelled at offset {offset}"
            raise asyncio.CancelledError(msg)

        params = build_query(scientific_name, offset, years, limit=page_limit)
        resp = await client.get(OCCURRENCE_SEARCH_URL, params=params)
        if not resp.is_success:
            raise FetchError(resp.status_code, resp.reason_phrase)

        page = parse_page(resp.json())
        records.extend(page.records)
        if page.is_last:
            break
        offset += page_limit

    return records[:max_records]


# =============================================================================
# Multi-species
# =============================================================================


async def _gather_species(
    catalog: Iterable[SpeciesDescriptor],
    max_records: int,
    *,
    client: httpx.AsyncClient | None,
    current_year: int | None,
    lookback_years: int,
    page_limit: int,
    cancel_event: asyncio.Event | None,
    return_exceptions: bool,
) -> dict[str, Any]:
    """Run one fetch per species concurrently, keyed by species id."""
    catalog = list(catalog)
    seen: set[str] = set()
    for species in catalog:
        if species.id in seen:
            msg = f"duplicate species id {species.id!r} in catalog"
            raise ValueError(msg)
        seen.add(species.id)

    if client is None:
        async with create_async_client() as owned:
            return await _gather_species(
                catalog,
                max_records,
                client=owned,
                current_year=current_year,
                lookback_years=lookback_years,
                page_limit=page_limit,
                cancel_event=cancel_event,
                return_exceptions=return_exceptions,
            )

    # One window for the whole batch
    year = year_window(current_year, lookback_years)[1]
    tasks = {
        species.id: asyncio.create_task(
            fetch_occurrences_async(
                species.scientific_name,
                max_records,
                client=client,
                current_year=year,
                lookback_years=lookback_years,
                page_limit=page_limit,
                cancel_event=cancel_event,
            ),
            name=f"fetch-{species.id}",
        )
        for species in catalog
    }

    try:
        results = await asyncio.gather(*tasks.values(), return_exceptions=return_exceptions)
    except BaseException:
        for task in tasks.values():
            task.cancel()
        await asyncio.gather(*tasks.values(), return_exceptions=True)
        raise

    return dict(zip(tasks, results, strict=True))


async def fetch_all(
    catalog: Iterable[SpeciesDescriptor],
    max_records: int = MAX_PER_SPECIES,
    *,
    client: httpx.AsyncClient | None = None,
    current_year: int | None = None,
    lookback_years: int = YEARS_BACK,
    page_limit: int = PAGE_LIMIT,
    cancel_event: asyncio.Event | None = None,
) -> dict[str, list[OccurrenceRecord]]:
    """
    Fetch every catalog species concurrently.

    All or nothing: the first failure cancels the other fetches and
    propagates.  Use ``fetch_all_settled`` to keep partial results.

    Raises:
        ValueError: Two catalog entries share a species id.

    Returns:
        Dict mapping species id → occurrence records.
    """
    return await _gather_species(
        catalog,
        max_records,
        client=client,
        current_year=current_year,
        lookback_years=lookback_years,
        page_limit=page_limit,
        cancel_event=cancel_event,
        return_exceptions=False,
    )


async def fetch_all_settled(
    catalog: Iterable[SpeciesDescriptor],
    max_records: int = MAX_PER_SPECIES,
    *,
    client: httpx.AsyncClient | None = None,
    current_year: int | None = None,
    lookback_years: int = YEARS_BACK,
    page_limit: int = PAGE_LIMIT,
    cancel_event: asyncio.Event | None = None,
) -> dict[str, list[OccurrenceRecord] | FetchError]:
    """
    Fetch every catalog species concurrently, keeping per-species failures.

    A species whose fetch raised ``FetchError`` maps to that error instead
    of a record list.  Any other exception (transport errors, cancellation)
    still propagates.

    Returns:
        Dict mapping species id → records or the FetchError it hit.
    """
    outcomes = await _gather_species(
        catalog,
        max_records,
        client=client,
        current_year=current_year,
        lookback_years=lookback_years,
        page_limit=page_limit,
        cancel_event=cancel_event,
        return_exceptions=True,
    )

    settled: dict[str, list[OccurrenceRecord] | FetchError] = {}
    for species_id, outcome in outcomes.items():
        if isinstance(outcome, BaseException) and not isinstance(outcome, FetchError):
            raise outcome
        settled[species_id] = outcome
    return settled
