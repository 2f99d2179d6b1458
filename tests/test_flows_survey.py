"""
Tests for the survey flow module.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, Mock, patch

import pytest

from urchin_radar.analysis import AggregationResult
from urchin_radar.datasources.gbif import FetchError, OccurrenceRecord
from urchin_radar.flows import survey as survey_module
from urchin_radar.schemas import RiskThresholds, RiskTier, SpeciesDescriptor

if TYPE_CHECKING:
    from collections.abc import Iterator

CATALOG = [
    SpeciesDescriptor(id="a", scientific_name="Urchinus alpha", common_name="Alpha Urchin"),
    SpeciesDescriptor(id="b", scientific_name="Urchinus beta", common_name="Beta Urchin"),
]


def _points(lat: float, lng: float, n: int) -> list[OccurrenceRecord]:
    return [OccurrenceRecord(key=i, lat=lat, lng=lng) for i in range(n)]


OCCURRENCES = {
    "a": _points(35.4, -120.9, 12),
    "b": _points(-33.9, 151.2, 2),
}


class TestAggregateSpecies:
    """Test the per-species aggregation task."""

    def test_aggregates_and_reports(self, capsys: pytest.CaptureFixture[str]) -> None:
        result = survey_module.aggregate_species.fn(
            CATALOG[0], OCCURRENCES["a"], 1.0, RiskThresholds(high=30, medium=10)
        )

        assert isinstance(result, AggregationResult)
        assert result.summary.cell_count == 1
        assert result.cells[0].risk is RiskTier.MEDIUM
        out = capsys.readouterr().out
        assert "Alpha Urchin: 12 records in 1 cells (0 high, 1 medium, 0 low)" in out


class TestSurveyBody:
    """Test the flow body without a Prefect run."""

    @pytest.fixture(autouse=True)
    def _plain_task(self) -> Iterator[Mock]:
        with patch(
            "urchin_radar.flows.survey.aggregate_species",
            side_effect=survey_module.aggregate_species.fn,
        ) as mock_task:
            yield mock_task

    @patch("urchin_radar.flows.survey.fetch_all", new_callable=AsyncMock)
    def test_results_in_catalog_order(self, mock_fetch: AsyncMock) -> None:
        mock_fetch.return_value = OCCURRENCES

        results = asyncio.run(
            survey_module.survey.fn(
                CATALOG,
                max_records=100,
                cell_size_deg=1.0,
                thresholds=RiskThresholds(high=10, medium=2),
                current_year=2026,
            )
        )

        assert list(results) == ["a", "b"]
        assert results["a"].cells[0].risk is RiskTier.HIGH
        assert results["b"].cells[0].risk is RiskTier.MEDIUM

        args, kwargs = mock_fetch.call_args
        assert [s.id for s in args[0]] == ["a", "b"]
        assert args[1] == 100
        assert kwargs["current_year"] == 2026
        assert kwargs["page_limit"] == 300

    @patch("urchin_radar.flows.survey.fetch_all", new_callable=AsyncMock)
    def test_defaults_from_settings(self, mock_fetch: AsyncMock) -> None:
        mock_fetch.return_value = {"purple": [], "longspined": [], "green": []}

        results = asyncio.run(survey_module.survey.fn())

        assert list(results) == ["purple", "longspined", "green"]
        assert all(r.summary.total_records == 0 for r in results.values())
        assert mock_fetch.call_args.args[1] == 2000

    @patch("urchin_radar.flows.survey.fetch_all", new_callable=AsyncMock)
    def test_explicit_values_override_settings(self, mock_fetch: AsyncMock) -> None:
        mock_fetch.return_value = OCCURRENCES

        results = asyncio.run(
            survey_module.survey.fn(CATALOG, max_records=1, cell_size_deg=0.25)
        )

        assert mock_fetch.call_args.args[1] == 1
        cell = results["a"].cells[0]
        assert (cell.lat_index, cell.lng_index) == (141, -484)
        assert cell.lat == pytest.approx(35.375)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_records": 0},
            {"max_records": -5},
            {"cell_size_deg": 0.0},
            {"cell_size_deg": -1.0},
        ],
    )
    @patch("urchin_radar.flows.survey.fetch_all", new_callable=AsyncMock)
    def test_rejects_non_positive_values(
        self, mock_fetch: AsyncMock, kwargs: dict[str, float]
    ) -> None:
        """Zero is rejected rather than replaced by the settings default."""
        with pytest.raises(ValueError, match="must be"):
            asyncio.run(survey_module.survey.fn(CATALOG, **kwargs))

        mock_fetch.assert_not_awaited()

    @patch("urchin_radar.flows.survey.fetch_all", new_callable=AsyncMock)
    def test_warns_on_misordered_thresholds(
        self, mock_fetch: AsyncMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        mock_fetch.return_value = OCCURRENCES

        asyncio.run(
            survey_module.survey.fn(CATALOG, thresholds=RiskThresholds(high=5, medium=20))
        )

        assert "not ordered" in capsys.readouterr().out

    @patch("urchin_radar.flows.survey.fetch_all", new_callable=AsyncMock)
    def test_fetch_error_propagates(self, mock_fetch: AsyncMock) -> None:
        mock_fetch.side_effect = FetchError(503, "Service Unavailable")

        with pytest.raises(FetchError):
            asyncio.run(survey_module.survey.fn(CATALOG))


class TestSurveyFlow:
    """Test the flow end to end under Prefect."""

    @patch("urchin_radar.flows.survey.fetch_all", new_callable=AsyncMock)
    def test_survey(self, mock_fetch: AsyncMock) -> None:
        mock_fetch.return_value = OCCURRENCES

        results = asyncio.run(survey_module.survey(CATALOG, max_records=50))

        assert results["a"].summary.total_records == 12
        assert results["b"].summary.total_records == 2
        mock_fetch.assert_awaited_once()
