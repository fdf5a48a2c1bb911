# =============================================================================
# eco_core/plots/charts.py
# Plotly figures for EcoNexus
# =============================================================================
"""
Plotly figures built from the payloads in eco_core.plots.payloads.
"""
from __future__ import annotations

import plotly.graph_objects as go
from typing import Any, Dict, List, Optional

import pandas as pd

from eco_core.data.fallback import ENERGY_SOURCE_LABELS
from .payloads import ENERGY_SOURCE_COLORS, map_center

DISASTER_COLORS = {
    "flood": "#3B82F6",
    "fire": "#EF4444",
    "earthquake": "#F59E0B",
    "storm": "#8B5CF6",
}


def get_chart_layout(
    title: str = "",
    height: int = 340,
    dark: bool = False,
    show_legend: bool = True,
) -> Dict[str, Any]:
    """Standard layout shared by every EcoNexus chart."""
    text = "#F9FAFB" if dark else "#111827"
    grid = "rgba(255,255,255,0.08)" if dark else "#E5E7EB"
    return {
        "template": "plotly_dark" if dark else "plotly_white",
        "paper_bgcolor": "rgba(0,0,0,0)",
        "plot_bgcolor": "rgba(0,0,0,0)",
        "height": height,
        "title": {"text": title, "font": {"size": 16, "color": text}},
        "margin": {"l": 40, "r": 20, "t": 60 if title else 30, "b": 40},
        "showlegend": show_legend,
        "legend": {"orientation": "h", "y": -0.2},
        "xaxis": {"gridcolor": grid},
        "yaxis": {"gridcolor": grid},
    }


def energy_bar_chart(frame: pd.DataFrame, title: str = "Energy by source (kWh)", dark: bool = False) -> go.Figure:
    """Stacked daily bars, one trace per source column."""
    fig = go.Figure()
    labels = [d.strftime("%a %d") if hasattr(d, "strftime") else str(d) for d in frame.index]
    for source in frame.columns:
        fig.add_trace(go.Bar(
            x=labels,
            y=frame[source].tolist(),
            name=ENERGY_SOURCE_LABELS.get(source, source),
            marker_color=ENERGY_SOURCE_COLORS.get(source),
        ))
    fig.update_layout(barmode="stack", **get_chart_layout(title, dark=dark))
    return fig


def energy_flow_chart(payload: List[Dict[str, Any]], dark: bool = False) -> go.Figure:
    """Share of total output per source."""
    shown = [p for p in payload if p["value"] > 0]
    fig = go.Figure(go.Pie(
        labels=[p["name"] for p in shown],
        values=[p["value"] for p in shown],
        marker={"colors": [p["color"] for p in shown]},
        hole=0.55,
        sort=False,
    ))
    fig.update_layout(**get_chart_layout("Energy mix", dark=dark))
    return fig


def disaster_map_figure(points: List[Dict[str, Any]], zoom: int = 9) -> go.Figure:
    """Intensity heat layer plus a marker per zone."""
    lat, lng = map_center(points)
    fig = go.Figure()
    if points:
        fig.add_trace(go.Densitymapbox(
            lat=[p["lat"] for p in points],
            lon=[p["lng"] for p in points],
            z=[p["intensity"] / 10 for p in points],
            radius=30,
            showscale=False,
            name="Intensity",
        ))
        fig.add_trace(go.Scattermapbox(
            lat=[p["lat"] for p in points],
            lon=[p["lng"] for p in points],
            mode="markers",
            marker={
                "size": 12,
                "color": [DISASTER_COLORS.get(p["type"], "#6B7280") for p in points],
            },
            text=[f"{p['name']} ({p['type']})<br>{p['description']}" for p in points],
            hoverinfo="text",
            name="Zones",
        ))
    fig.update_layout(
        mapbox={"style": "open-street-map", "center": {"lat": lat, "lon": lng}, "zoom": zoom},
        margin={"l": 0, "r": 0, "t": 0, "b": 0},
        height=420,
        showlegend=False,
    )
    return fig


def forest_health_chart(payload: Dict[str, List], dark: bool = False) -> go.Figure:
    fig = go.Figure(go.Scatter(
        x=payload["labels"],
        y=payload["health"],
        mode="lines+markers",
        line={"color": "#22C55E", "width": 2},
        name="Health",
    ))
    layout = get_chart_layout("Forest health by region (%)", dark=dark, show_legend=False)
    layout["yaxis"] = {**layout["yaxis"], "range": [0, 100]}
    fig.update_layout(**layout)
    return fig
