# =============================================================================
# 02_Alerts.py - Environmental alerts with live updates
# =============================================================================
from __future__ import annotations
import streamlit as st
from streamlit_autorefresh import st_autorefresh

from eco_core.auth.navigation import require_authentication, add_logout_button
from eco_core.data.alert_service import ALERTS_TABLE, AlertService, mark_read_locally, unread_count
from eco_core.data.fallback import ALERT_TYPES
from eco_core.data.realtime import watch_table
from eco_core.data.supabase_client import get_backend_client
from eco_core.errors import EcoNexusError
from eco_core.ui.components import alert_card, error_message, flash, provenance_notice, show_flashes
from eco_core.ui.theme import apply_css, get_theme_context, render_header

st.set_page_config(page_title="Alerts - EcoNexus", page_icon="🔔", layout="wide")

theme = get_theme_context()
apply_css(theme.colors)

auth = require_authentication()
add_logout_button()

service = AlertService(auth.client)

# =============================================================================
# LIVE UPDATES
# =============================================================================
# Periodic rerun; the subscription callback runs off the script thread and
# only bumps a counter that is compared here.
ALERTS_REFRESH_SECONDS = 10
st_autorefresh(interval=ALERTS_REFRESH_SECONDS * 1000, key="alerts_autorefresh")


@st.cache_resource
def alerts_feed():
    """One alerts subscription per server process, shared by every session."""
    return watch_table(get_backend_client(), ALERTS_TABLE)


try:
    changes, _ = alerts_feed()
except EcoNexusError as e:
    changes = None
    st.caption(f"Live updates unavailable: {e.message}")

if changes is not None and st.session_state.get("alerts_seen") != changes.count:
    st.session_state["alerts_seen"] = changes.count
    st.session_state.pop("alerts_data", None)

# =============================================================================
# LIST
# =============================================================================
col_filter, col_limit = st.columns([2, 1])
with col_filter:
    alert_type = st.selectbox(
        "Type",
        ["all", *ALERT_TYPES],
        format_func=lambda t: t.replace("_", " ").title(),
    )
with col_limit:
    limit = st.slider("Show", min_value=5, max_value=50, value=20, step=5)

query = (alert_type, limit)
if st.session_state.get("alerts_query") != query or "alerts_data" not in st.session_state:
    st.session_state["alerts_query"] = query
    st.session_state["alerts_data"] = service.fetch_alerts(
        limit=limit, alert_type=None if alert_type == "all" else alert_type
    )

result = st.session_state["alerts_data"]
alerts = result.data or []

render_header("🔔 Alerts", f"{unread_count(alerts)} unread")
provenance_notice(result, "alerts")

show_flashes()

if not alerts:
    st.info("No alerts.")

for alert in alerts:
    col_card, col_action = st.columns([6, 1])
    with col_card:
        alert_card(alert)
    with col_action:
        if not alert.get("is_read") and st.button("Mark read", key=f"read_{alert['id']}"):
            # Sample alerts only exist locally
            if not result.is_synthesized:
                outcome = service.mark_alert_read(alert["id"])
                if not outcome.success:
                    flash("warning", f"Read state not saved online: {error_message(outcome.error)}")
            result.data = mark_read_locally(alerts, alert["id"])
            st.rerun()
