# =============================================================================
# 04_Environment.py - Disaster zones, forests, drone scans and community
# =============================================================================
"""
Environment page

Tab Structure:
1. Disaster Map - active zones from the last week
2. Forests - regional health and CO2 absorption
3. Drone Scans - recent scans and a submission form
4. Community - posts from other users
"""
from __future__ import annotations
import pandas as pd
import streamlit as st

from eco_core.auth.navigation import require_authentication, add_logout_button
from eco_core.data.environment_service import DRONE_SCAN_TYPES, EnvironmentService
from eco_core.errors import error_boundary
from eco_core.plots import (
    disaster_map_figure,
    disaster_map_payload,
    forest_chart_payload,
    forest_health_chart,
)
from eco_core.ui.components import error_message, post_card, provenance_notice, scan_card
from eco_core.ui.theme import apply_css, get_theme_context, render_header

st.set_page_config(page_title="Environment - EcoNexus", page_icon="🌍", layout="wide")

theme = get_theme_context()
apply_css(theme.colors)

auth = require_authentication()
add_logout_button()

render_header("🌍 Environment", "Disasters, forests and what the community is seeing")

service = EnvironmentService(auth.client)


@error_boundary(error_message="The disaster map could not be drawn.")
def render_map(points):
    st.plotly_chart(disaster_map_figure(points), use_container_width=True)


@error_boundary(error_message="The forest chart could not be drawn.")
def render_forest_chart(rows):
    st.plotly_chart(forest_health_chart(forest_chart_payload(rows), dark=theme.is_dark),
                    use_container_width=True)


tab_map, tab_forest, tab_drone, tab_community = st.tabs([
    "🗺️ Disaster Map", "🌲 Forests", "🛸 Drone Scans", "💬 Community",
])

# =============================================================================
# DISASTER MAP
# =============================================================================
with tab_map:
    col_days, col_active = st.columns([3, 1])
    with col_days:
        days = st.slider("Reported within (days)", min_value=1, max_value=30, value=7)
    with col_active:
        active_only = st.checkbox("Active only", value=True)

    zones = service.fetch_disaster_zones(days=days, active_only=active_only)
    points = disaster_map_payload(zones.data or [])
    render_map(points)
    if points:
        st.dataframe(
            pd.DataFrame(points)[["name", "type", "intensity", "radius"]],
            use_container_width=True,
            hide_index=True,
        )
    else:
        st.info("No disaster zones reported for this window.")
    provenance_notice(zones, "disaster zones")

# =============================================================================
# FORESTS
# =============================================================================
with tab_forest:
    region = st.text_input("Filter regions", placeholder="e.g. Amazon")
    forests = service.fetch_forest_data(region.strip() or None)
    rows = forests.data or []

    if rows:
        st.metric("Effective CO2 absorption", f"{forests.metadata.get('energy_impact', 0):,.1f} t/yr")
        render_forest_chart(rows)
        st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
    else:
        st.info("No forest regions found.")
    provenance_notice(forests, "forest data")

# =============================================================================
# DRONE SCANS
# =============================================================================
with tab_drone:
    with st.form("drone_scan_form", clear_on_submit=True):
        location = st.text_input("Location name")
        col_lat, col_lng = st.columns(2)
        with col_lat:
            lat = st.number_input("Latitude", min_value=-90.0, max_value=90.0, value=0.0, format="%.5f")
        with col_lng:
            lng = st.number_input("Longitude", min_value=-180.0, max_value=180.0, value=0.0, format="%.5f")
        scan_type = st.selectbox("Scan type", DRONE_SCAN_TYPES, format_func=str.capitalize)
        notes = st.text_area("Notes")
        submitted = st.form_submit_button("Submit scan")

    if submitted:
        outcome = service.submit_drone_scan({
            "location_name": location,
            "lat": lat,
            "lng": lng,
            "scan_type": scan_type,
            "notes": notes,
        })
        if outcome.success:
            st.success("Scan submitted.")
        else:
            st.error(error_message(outcome.error))

    scans = service.fetch_drone_scans()
    for scan in scans.data or []:
        scan_card(scan)
    if not scans.data:
        st.info("No drone scans yet.")
    provenance_notice(scans, "drone scans")

# =============================================================================
# COMMUNITY
# =============================================================================
with tab_community:
    with st.form("post_form", clear_on_submit=True):
        content = st.text_area("Share an observation", max_chars=500)
        posted = st.form_submit_button("Post")
    if posted:
        outcome = service.create_post(auth.user_id, content)
        if outcome.success:
            st.success("Posted.")
        else:
            st.error(error_message(outcome.error))

    posts = service.fetch_posts(auth.user_id)
    for post in posts.data or []:
        post_card(post)
    if not posts.data:
        st.info("No posts yet.")
    provenance_notice(posts, "posts")
