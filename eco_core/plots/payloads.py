# =============================================================================
# eco_core/plots/payloads.py
# Visualization payloads handed to the rendering surface
# =============================================================================
"""
Arrays of labeled numeric points built from fetched records. Chart and map
builders consume these; they never touch raw rows.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from eco_core.data.fallback import DEFAULT_CENTER, ENERGY_SOURCES, ENERGY_SOURCE_LABELS


ENERGY_SOURCE_COLORS = {
    "solar": "#F59E0B",
    "wind": "#3B82F6",
    "hydro": "#06B6D4",
    "biomass": "#10B981",
    "geothermal": "#EF4444",
}

CHART_DAYS = 7


def _selected(sources: Optional[Iterable[str]]) -> List[str]:
    if sources is None:
        return list(ENERGY_SOURCES)
    chosen = set(sources)
    return [s for s in ENERGY_SOURCES if s in chosen]


def energy_chart_frame(
    readings: Sequence[Dict[str, Any]],
    sources: Optional[Iterable[str]] = None,
    days: int = CHART_DAYS,
) -> pd.DataFrame:
    """
    Daily totals per energy source.

    Returns:
        DataFrame indexed by date (ascending, last ``days`` dates), one
        column per selected source, zero where a source had no readings
    """
    columns = _selected(sources)
    if not readings:
        return pd.DataFrame(columns=columns, dtype=float)

    df = pd.DataFrame(list(readings))
    df = df[df["reading_type"].isin(columns)]
    if df.empty:
        return pd.DataFrame(columns=columns, dtype=float)

    df["date"] = pd.to_datetime(df["timestamp"], utc=True).dt.date
    df["reading_value"] = pd.to_numeric(df["reading_value"], errors="coerce").fillna(0.0)

    frame = (
        df.pivot_table(index="date", columns="reading_type", values="reading_value", aggfunc="sum")
        .reindex(columns=columns)
        .fillna(0.0)
        .sort_index()
    )
    return frame.tail(days)


def energy_flow_payload(
    readings: Sequence[Dict[str, Any]],
    sources: Optional[Iterable[str]] = None,
) -> List[Dict[str, Any]]:
    """Total value per selected source: [{id, name, value, color}, ...]."""
    totals = {source: 0.0 for source in _selected(sources)}
    for reading in readings:
        kind = reading.get("reading_type")
        if kind in totals:
            totals[kind] += float(reading.get("reading_value") or 0)

    return [
        {
            "id": source,
            "name": ENERGY_SOURCE_LABELS[source],
            "value": round(value, 2),
            "color": ENERGY_SOURCE_COLORS[source],
        }
        for source, value in totals.items()
    ]


def disaster_map_payload(zones: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Map points for disaster zones; rows without coordinates are skipped."""
    points = []
    for zone in zones:
        if zone.get("lat") is None or zone.get("lng") is None:
            continue
        points.append({
            "id": zone.get("id"),
            "name": zone.get("name") or "Unnamed zone",
            "description": zone.get("description") or "",
            "lat": float(zone["lat"]),
            "lng": float(zone["lng"]),
            "intensity": float(zone.get("intensity") or 0),
            "type": zone.get("disaster_type") or "unknown",
            "radius": float(zone.get("radius_meters") or 0),
        })
    return points


def map_center(points: Sequence[Dict[str, Any]]) -> Tuple[float, float]:
    """Mean position of the points, or the default center when empty."""
    if not points:
        return DEFAULT_CENTER
    lat = sum(p["lat"] for p in points) / len(points)
    lng = sum(p["lng"] for p in points) / len(points)
    return lat, lng


def forest_chart_payload(rows: Sequence[Dict[str, Any]]) -> Dict[str, List]:
    """Health per region with three-letter labels."""
    return {
        "labels": [str(row.get("region_name") or "")[:3] for row in rows],
        "health": [float(row.get("health") or 0) for row in rows],
    }
