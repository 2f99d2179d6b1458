"""JSON serialization helpers for aggregation results."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from urchin_radar.analysis.grid import AggregationResult, GridCell, Summary
    from urchin_radar.datasources.gbif import OccurrenceRecord


def occurrence_to_dict(record: OccurrenceRecord) -> dict[str, Any]:
    return {
        "key": record.key,
        "lat": record.lat,
        "lng": record.lng,
        "year": record.year,
        "country": record.country,
        "state_province": record.state_province,
    }


def summary_to_dict(summary: Summary) -> dict[str, Any]:
    """Serialize a Summary, including the derived high-risk percentage."""
    return {
        "total_records": summary.total_records,
        "cell_count": summary.cell_count,
        "high_count": summary.high_count,
        "med_count": summary.med_count,
        "low_count": summary.low_count,
        "high_risk_percent": summary.high_risk_percent,
    }


def cell_to_dict(cell: GridCell, *, include_samples: bool = True) -> dict[str, Any]:
    result: dict[str, Any] = {
        "id": cell.id,
        "lat_index": cell.lat_index,
        "lng_index": cell.lng_index,
        "lat": cell.lat,
        "lng": cell.lng,
        "count": cell.count,
        "risk": str(cell.risk),
    }
    if include_samples:
        result["samples"] = [occurrence_to_dict(s) for s in cell.samples]
    return result


def aggregation_to_dict(
    result: AggregationResult,
    *,
    include_samples: bool = True,
    sort_cells: bool = False,
) -> dict[str, Any]:
    """Serialize an AggregationResult to a JSON-compatible dict.

    Args:
        result: The aggregation to serialize.
        include_samples: Embed each cell's contributing records.
        sort_cells: Order cells by index instead of first-seen order.

    Returns:
        Dict with ``cells`` and ``summary`` keys.
    """
    cells = result.sorted_cells() if sort_cells else result.cells
    return {
        "cells": [cell_to_dict(c, include_samples=include_samples) for c in cells],
        "summary": summary_to_dict(result.summary),
    }
