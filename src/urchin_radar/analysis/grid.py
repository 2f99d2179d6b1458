"""Bin occurrence records into lat/lng grid cells and classify risk.

Cells are degree-aligned rectangles: ``floor(coord / cell_size)`` on each
axis.  Their ground area shrinks toward the poles; no geodesic correction
is applied.

A cell's risk tier depends only on how many records fall in it::

    count >= high    → High
    count >= medium  → Medium
    otherwise        → Low
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from urchin_radar.schemas import RiskThresholds, RiskTier

if TYPE_CHECKING:
    from collections.abc import Iterable

    from urchin_radar.datasources.gbif import OccurrenceRecord

DEFAULT_CELL_SIZE_DEG = 1.0

# =============================================================================
# Data Model
# =============================================================================


@dataclass
class GridCell:
    """All records sharing one ``(lat_index, lng_index)``."""

    lat_index: int
    lng_index: int
    count: int
    risk: RiskTier
    lat: float
    lng: float
    samples: list[OccurrenceRecord] = field(default_factory=list)

    @property
    def key(self) -> tuple[int, int]:
        return (self.lat_index, self.lng_index)

    @property
    def id(self) -> str:
        """String form of ``key``, e.g. ``"35_-121"``."""
        return f"{self.lat_index}_{self.lng_index}"


@dataclass
class Summary:
    """Population-wide counts for one aggregation run."""

    total_records: int = 0
    cell_count: int = 0
    high_count: int = 0
    med_count: int = 0
    low_count: int = 0

    @property
    def high_risk_percent(self) -> float:
        """Share of cells at High risk, as a percent to one decimal place."""
        if self.cell_count == 0:
            return 0.0
        return round(self.high_count / self.cell_count * 100, 1)


@dataclass
class AggregationResult:
    """Cells in first-seen order, plus their summary."""

    cells: list[GridCell] = field(default_factory=list)
    summary: Summary = field(default_factory=Summary)

    def sorted_cells(self) -> list[GridCell]:
        """Cells ordered by ``(lat_index, lng_index)``, independent of input order."""
        return sorted(self.cells, key=lambda c: c.key)

    def cell_by_id(self, cell_id: str) -> GridCell | None:
        for cell in self.cells:
            if cell.id == cell_id:
                return cell
        return None


# =============================================================================
# Computation
# =============================================================================


def cell_index(
    lat: float,
    lng: float,
    cell_size_deg: float = DEFAULT_CELL_SIZE_DEG,
) -> tuple[int, int]:
    """Grid indices for a point. ``(35.4, -120.9)`` at 1° → ``(35, -121)``."""
    return math.floor(lat / cell_size_deg), math.floor(lng / cell_size_deg)


def classify_risk(count: int, thresholds: RiskThresholds) -> RiskTier:
    """Risk tier for a cell holding ``count`` records.

    High is checked first, so a count meeting both thresholds is High.
    A count equal to a threshold takes that threshold's tier.
    """
    if count >= thresholds.high:
        return RiskTier.HIGH
    if count >= thresholds.medium:
        return RiskTier.MEDIUM
    return RiskTier.LOW


def aggregate(
    records: Iterable[OccurrenceRecord],
    cell_size_deg: float = DEFAULT_CELL_SIZE_DEG,
    thresholds: RiskThresholds | None = None,
) -> AggregationResult:
    """
    Group records into grid cells and classify each cell's risk.

    Pure: the same records in the same order always give the same result.

    Args:
        records: Occurrences with finite coordinates (may be empty).
        cell_size_deg: Cell edge length in degrees.
        thresholds: Risk thresholds (default: High at 30, Medium at 10).

    Returns:
        AggregationResult with cells in first-seen order.
    """
    thresholds = thresholds or RiskThresholds()

    # dict keeps insertion order, so cells come out in first-seen order
    groups: dict[tuple[int, int], list[OccurrenceRecord]] = {}
    total = 0
    for record in records:
        groups.setdefault(cell_index(record.lat, record.lng, cell_size_deg), []).append(record)
        total += 1

    summary = Summary(total_records=total, cell_count=len(groups))
    cells: list[GridCell] = []
    for (lat_index, lng_index), samples in groups.items():
        count = len(samples)
        risk = classify_risk(count, thresholds)
        if risk is RiskTier.HIGH:
            summary.high_count += 1
        elif risk is RiskTier.MEDIUM:
            summary.med_count += 1
        else:
            summary.low_count += 1

        cells.append(
            GridCell(
                lat_index=lat_index,
                lng_index=lng_index,
                count=count,
                risk=risk,
                lat=(lat_index + 0.5) * cell_size_deg,
                lng=(lng_index + 0.5) * cell_size_deg,
                samples=samples,
            )
        )

    return AggregationResult(cells=cells, summary=summary)
