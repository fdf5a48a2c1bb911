# =============================================================================
# 01_Energy.py - Energy readings by source
# =============================================================================
"""
Energy page

Sections:
1. Period / source selection
2. Daily totals per source (stacked bars)
3. Energy mix from the most recent readings
4. Manual reading entry
"""
from __future__ import annotations
import streamlit as st

from eco_core.auth.navigation import require_authentication, add_logout_button
from eco_core.data.energy_service import EnergyPeriod, EnergyService
from eco_core.data.fallback import ENERGY_SOURCES, ENERGY_SOURCE_LABELS, READING_UNIT
from eco_core.errors import error_boundary
from eco_core.plots import (
    energy_bar_chart,
    energy_chart_frame,
    energy_flow_chart,
    energy_flow_payload,
)
from eco_core.ui.components import error_message, provenance_notice
from eco_core.ui.theme import apply_css, get_theme_context, render_header

st.set_page_config(page_title="Energy - EcoNexus", page_icon="⚡", layout="wide")

theme = get_theme_context()
apply_css(theme.colors)

auth = require_authentication()
add_logout_button()

render_header("⚡ Energy", "Output from your renewable sources")

service = EnergyService(auth.client)


@error_boundary(error_message="The energy chart could not be drawn.")
def render_bar_chart(frame):
    st.plotly_chart(energy_bar_chart(frame, dark=theme.is_dark), use_container_width=True)


@error_boundary(error_message="The energy mix could not be drawn.")
def render_flow_chart(payload):
    st.plotly_chart(energy_flow_chart(payload, dark=theme.is_dark), use_container_width=True)


# =============================================================================
# FILTERS
# =============================================================================
col_period, col_sources = st.columns([1, 3])
with col_period:
    period = st.radio(
        "Period",
        [p.value for p in EnergyPeriod],
        index=1,
        format_func=str.capitalize,
        horizontal=True,
    )
with col_sources:
    sources = st.multiselect(
        "Sources",
        list(ENERGY_SOURCES),
        default=list(ENERGY_SOURCES),
        format_func=ENERGY_SOURCE_LABELS.get,
    )

# Timestamps per period: 6 x 4h, 7 x 1d, 5 x 7d
PERIOD_LIMITS = {"day": 6, "week": 7, "month": 5}
readings = service.fetch_energy_readings(period, PERIOD_LIMITS[period])

# =============================================================================
# CHARTS
# =============================================================================
col_bar, col_mix = st.columns([3, 2])

with col_bar:
    frame = energy_chart_frame(readings.data or [], sources, days=31 if period == "month" else 7)
    if frame.empty:
        st.info("No readings for this period.")
    else:
        render_bar_chart(frame)
    provenance_notice(readings, "energy readings")

with col_mix:
    recent = service.fetch_recent_readings(limit=100)
    payload = energy_flow_payload(recent.data or [], sources)
    if any(p["value"] > 0 for p in payload):
        render_flow_chart(payload)
    else:
        st.info("No recent readings.")
    for item in payload:
        st.markdown(f"<span style='color:{item['color']}'>●</span> {item['name']}: "
                    f"**{item['value']:.1f} {READING_UNIT}**", unsafe_allow_html=True)
    provenance_notice(recent, "energy mix")

# =============================================================================
# NEW READING
# =============================================================================
with st.expander("➕ Record a reading"):
    with st.form("reading_form", clear_on_submit=True):
        reading_type = st.selectbox("Source", list(ENERGY_SOURCES), format_func=ENERGY_SOURCE_LABELS.get)
        value = st.number_input(f"Value ({READING_UNIT})", min_value=0.0, step=1.0)
        submitted = st.form_submit_button("Save")
    if submitted:
        result = service.insert_reading(reading_type, value)
        if result.success:
            st.success("Reading saved.")
        else:
            st.error(error_message(result.error))
