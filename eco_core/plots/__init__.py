"""
Plotting utilities for EcoNexus.

Public API:
- energy_chart_frame, energy_flow_payload
- disaster_map_payload, map_center
- forest_chart_payload
- energy_bar_chart, energy_flow_chart
- disaster_map_figure, forest_health_chart
"""

from .payloads import (
    ENERGY_SOURCE_COLORS,
    energy_chart_frame,
    energy_flow_payload,
    disaster_map_payload,
    map_center,
    forest_chart_payload,
)
from .charts import (
    get_chart_layout,
    energy_bar_chart,
    energy_flow_chart,
    disaster_map_figure,
    forest_health_chart,
)

__all__ = [
    "ENERGY_SOURCE_COLORS",
    "energy_chart_frame",
    "energy_flow_payload",
    "disaster_map_payload",
    "map_center",
    "forest_chart_payload",
    "get_chart_layout",
    "energy_bar_chart",
    "energy_flow_chart",
    "disaster_map_figure",
    "forest_health_chart",
]
