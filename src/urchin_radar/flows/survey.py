"""
Prefect flow: fetch every catalog species from GBIF, then grid each one.

Fetching runs concurrently on one event loop; aggregation runs per species
afterwards and is cheap enough to recompute on every call.

Run locally:
    python -m urchin_radar.flows.survey

Run with Prefect dashboard:
    prefect server start &
    python -m urchin_radar.flows.survey
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence  # noqa: TC003 (flow annotations are resolved at runtime)

from prefect import flow, task

from urchin_radar.analysis.grid import AggregationResult, aggregate
from urchin_radar.catalog import DEFAULT_CATALOG
from urchin_radar.config import get_settings
from urchin_radar.datasources.gbif import OccurrenceRecord, fetch_all
from urchin_radar.schemas import RiskThresholds, SpeciesDescriptor
from urchin_radar.services.http import create_async_client


@task(name="aggregate-species")
def aggregate_species(
    species: SpeciesDescriptor,
    records: list[OccurrenceRecord],
    cell_size_deg: float,
    thresholds: RiskThresholds,
) -> AggregationResult:
    """Grid one species' occurrences and report the tier breakdown."""
    result = aggregate(records, cell_size_deg, thresholds)
    s = result.summary
    print(
        f"{species.common_name}: {s.total_records} records in {s.cell_count} cells "
        f"({s.high_count} high, {s.med_count} medium, {s.low_count} low)"
    )
    return result


@flow(name="urchin-survey", log_prints=True)
async def survey(
    catalog: Sequence[SpeciesDescriptor] | None = None,
    max_records: int | None = None,
    cell_size_deg: float | None = None,
    thresholds: RiskThresholds | None = None,
    current_year: int | None = None,
) -> dict[str, AggregationResult]:
    """
    Fetch and aggregate all species in ``catalog``.

    Any argument left as None comes from settings; explicit values are used
    as given and must be positive.  A single failed species fetch fails the
    whole flow.

    Returns:
        Dict mapping species id → AggregationResult, in catalog order.
    """
    settings = get_settings()
    catalog = list(catalog) if catalog is not None else list(DEFAULT_CATALOG)
    if max_records is None:
        max_records = settings.max_records_per_species
    if cell_size_deg is None:
        cell_size_deg = settings.cell_size_deg
    if thresholds is None:
        thresholds = settings.thresholds
    if max_records < 1:
        msg = f"max_records must be >= 1, got {max_records}"
        raise ValueError(msg)
    if cell_size_deg <= 0:
        msg = f"cell_size_deg must be positive, got {cell_size_deg}"
        raise ValueError(msg)

    if not thresholds.is_ordered:
        print(
            f"Warning: thresholds high={thresholds.high} medium={thresholds.medium} "
            "are not ordered high > medium > 0; risk tiers may be meaningless."
        )

    print(f"Fetching up to {max_records} records for {len(catalog)} species...")
    async with create_async_client(timeout=settings.http_timeout) as client:
        occurrences = await fetch_all(
            catalog,
            max_records,
            client=client,
            current_year=current_year,
            lookback_years=settings.lookback_years,
            page_limit=settings.page_limit,
        )

    return {
        species.id: aggregate_species(
            species, occurrences[species.id], cell_size_deg, thresholds
        )
        for species in catalog
    }


if __name__ == "__main__":
    results = asyncio.run(survey())
    print(f"Flow complete: {len(results)} species")
