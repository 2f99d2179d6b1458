"""Pure logic over fetched occurrence records.

Dependency rule: analysis/ imports datasource *models* only. It never
fetches data, awaits, or renders anything.

Modules:
  - grid: records -> grid cells with risk tiers + summary
  - serialization: AggregationResult -> JSON-compatible dict for renderers
"""

from urchin_radar.analysis.grid import (
    DEFAULT_CELL_SIZE_DEG,
    AggregationResult,
    GridCell,
    Summary,
    aggregate,
    cell_index,
    classify_risk,
)
from urchin_radar.analysis.serialization import aggregation_to_dict

__all__ = [
    "DEFAULT_CELL_SIZE_DEG",
    "AggregationResult",
    "GridCell",
    "Summary",
    "aggregate",
    "aggregation_to_dict",
    "cell_index",
    "classify_risk",
]
