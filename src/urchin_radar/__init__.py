"""Urchin Radar - sea urchin occurrence grids and invasiveness risk.

Architecture::

    datasources/   External APIs (GBIF occurrence search)
    analysis/      Pure logic over fetched records (grid binning, risk tiers)
    flows/         Prefect orchestration (fetch all species, aggregate each)
    services/      Shared utilities (HTTP clients, single pass per request)
    catalog.py     Species catalog passed into the pipeline at startup
    schemas.py     Species descriptors, risk thresholds, risk tiers

Data flow: catalog → datasources (fetch) → analysis (aggregate) → presentation

Presentation (maps, charts, layout) lives outside this package and consumes
``AggregationResult`` or its dict form from ``analysis.serialization``.
"""

__version__ = "0.1.0"

from urchin_radar.config import Settings
from urchin_radar.schemas import RiskThresholds, RiskTier, SpeciesDescriptor

__all__ = ["RiskThresholds", "RiskTier", "Settings", "SpeciesDescriptor", "__version__"]
