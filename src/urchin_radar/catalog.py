"""Species catalog.

``DEFAULT_CATALOG`` is the set of urchins the app ships with. Pipeline entry
points take a catalog argument rather than reading this constant, so tests
and callers can pass their own.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from urchin_radar.schemas import SpeciesDescriptor

if TYPE_CHECKING:
    from collections.abc import Iterable

DEFAULT_CATALOG: tuple[SpeciesDescriptor, ...] = (
    SpeciesDescriptor(
        id="purple",
        scientific_name="Strongylocentrotus purpuratus",
        common_name="Purple Sea Urchin",
        region_hint="US West Coast",
    ),
    SpeciesDescriptor(
        id="longspined",
        scientific_name="Centrostephanus rodgersii",
        common_name="Long-spined Sea Urchin",
        region_hint="Australia / Tasmania",
    ),
    SpeciesDescriptor(
        id="green",
        scientific_name="Strongylocentrotus droebachiensis",
        common_name="Green Sea Urchin",
        region_hint="North Atlantic",
    ),
)


def find_species(
    species_id: str,
    catalog: Iterable[SpeciesDescriptor] = DEFAULT_CATALOG,
) -> SpeciesDescriptor:
    """Look up a catalog entry by id.

    Raises:
        KeyError: If no entry has that id.
    """
    for species in catalog:
        if species.id == species_id:
            return species
    raise KeyError(species_id)


def select_species(
    species_ids: Iterable[str],
    catalog: Iterable[SpeciesDescriptor] = DEFAULT_CATALOG,
) -> list[SpeciesDescriptor]:
    """Subset of the catalog, in the order the ids were given."""
    entries = list(catalog)
    return [find_species(species_id, entries) for species_id in species_ids]
