# =============================================================================
# tests/unit/test_plots.py
# Unit Tests for visualization payloads and figures
# =============================================================================

import pytest
from datetime import timedelta

from eco_core.data.fallback import DEFAULT_CENTER, ENERGY_SOURCES, synthesize_energy_readings
from eco_core.plots import (
    disaster_map_figure,
    disaster_map_payload,
    energy_bar_chart,
    energy_chart_frame,
    energy_flow_chart,
    energy_flow_payload,
    forest_chart_payload,
    forest_health_chart,
    map_center,
)


class TestEnergyPayloads:

    def test_frame_one_row_per_day(self, fixed_now):
        readings = synthesize_energy_readings("week", 7, now=fixed_now)

        frame = energy_chart_frame(readings)

        assert list(frame.columns) == list(ENERGY_SOURCES)
        assert len(frame) == 7
        assert list(frame.index) == sorted(frame.index)

    def test_frame_sums_same_day(self, fixed_now):
        readings = [
            {"timestamp": fixed_now.isoformat(), "reading_type": "solar", "reading_value": 10},
            {"timestamp": (fixed_now + timedelta(hours=1)).isoformat(), "reading_type": "solar",
             "reading_value": 5.5},
            {"timestamp": fixed_now.isoformat(), "reading_type": "wind", "reading_value": 3},
        ]

        frame = energy_chart_frame(readings, sources=["solar", "wind"])

        assert frame.iloc[0]["solar"] == pytest.approx(15.5)
        assert frame.iloc[0]["wind"] == pytest.approx(3)

    def test_frame_empty_inputs(self):
        assert energy_chart_frame([]).empty
        assert energy_chart_frame([{"timestamp": "2024-01-01T00:00:00+00:00",
                                    "reading_type": "coal", "reading_value": 1}]).empty

    def test_flow_payload(self):
        readings = [
            {"reading_type": "solar", "reading_value": 10},
            {"reading_type": "solar", "reading_value": 2.5},
            {"reading_type": "hydro", "reading_value": 4},
        ]

        payload = energy_flow_payload(readings, sources=["solar", "hydro", "wind"])

        assert [p["id"] for p in payload] == ["solar", "wind", "hydro"]
        assert payload[0] == {"id": "solar", "name": "Solar", "value": 12.5, "color": "#F59E0B"}
        assert payload[1]["value"] == 0


class TestMapAndForestPayloads:

    def test_disaster_points(self):
        zones = [
            {"id": 1, "name": "Bay Flood", "lat": "37.7", "lng": -122.4, "intensity": 7,
             "disaster_type": "flood", "radius_meters": 1500},
            {"id": 2, "name": "No coords"},
        ]

        points = disaster_map_payload(zones)

        assert len(points) == 1
        assert points[0]["type"] == "flood"
        assert points[0]["radius"] == 1500.0
        assert points[0]["lat"] == 37.7

    def test_center(self):
        assert map_center([]) == DEFAULT_CENTER
        assert map_center([{"lat": 10, "lng": 20}, {"lat": 20, "lng": 40}]) == (15, 30)

    def test_forest_labels(self):
        payload = forest_chart_payload([{"region_name": "Amazon", "health": 82}, {"region_name": None}])
        assert payload == {"labels": ["Ama", ""], "health": [82.0, 0.0]}


class TestFigures:

    def test_figures_build(self, fixed_now):
        readings = synthesize_energy_readings("week", 7, now=fixed_now)

        bar = energy_bar_chart(energy_chart_frame(readings), dark=True)
        pie = energy_flow_chart(energy_flow_payload(readings))
        forest = forest_health_chart({"labels": ["Ama"], "health": [80.0]})

        assert len(bar.data) == len(ENERGY_SOURCES)
        assert len(pie.data[0].labels) == len(ENERGY_SOURCES)
        assert list(forest.layout.yaxis.range) == [0, 100]

    def test_empty_map_uses_default_center(self):
        fig = disaster_map_figure([])
        assert fig.layout.mapbox.center.lat == DEFAULT_CENTER[0]
        assert len(fig.data) == 0
