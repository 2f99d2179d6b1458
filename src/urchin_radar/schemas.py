"""
Domain models for urchin radar.

Pydantic models for static configuration values handed into the pipeline.
Per-record and per-cell structures are plain dataclasses next to the code
that produces them (``datasources.gbif``, ``analysis.grid``).
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

# =============================================================================
# Species
# =============================================================================


class SpeciesDescriptor(BaseModel):
    """A catalog entry: one species the pipeline fetches and grids."""

    model_config = {"frozen": True, "str_strip_whitespace": True}

    id: str = Field(..., min_length=1, description="Stable identifier")
    scientific_name: str = Field(..., min_length=1, description="GBIF query term")
    common_name: str = Field(..., description="Display name")
    region_hint: str = Field(default="", description="Where it is usually reported")

    @property
    def display_name(self) -> str:
        return f"{self.common_name} ({self.scientific_name})"


# =============================================================================
# Risk classification
# =============================================================================


class RiskTier(StrEnum):
    """Invasiveness risk of a grid cell, by report density."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class RiskThresholds(BaseModel):
    """Report counts at which a cell becomes High or Medium risk.

    Ordering is not enforced: ``high <= medium`` still classifies, the tiers
    just stop meaning much. Check ``is_ordered`` before trusting them.
    """

    model_config = {"frozen": True}

    high: int = 30
    medium: int = 10

    @property
    def is_ordered(self) -> bool:
        """True when ``high > medium > 0``."""
        return self.high > self.medium > 0
