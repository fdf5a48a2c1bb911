from __future__ import annotations
import streamlit as st

from eco_core.auth.navigation import get_auth_context, add_logout_button
from eco_core.data.alert_service import AlertService, unread_count
from eco_core.data.energy_service import EnergyService
from eco_core.data.fallback import format_display_name, resolve_display_name
from eco_core.data.profile_service import ProfileService
from eco_core.logging import setup_logging
from eco_core.plots import energy_chart_frame, energy_bar_chart
from eco_core.ui.components import alert_card, error_message, offline_banner, provenance_notice
from eco_core.ui.theme import apply_css, get_theme_context, render_header

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================
st.set_page_config(
    page_title="EcoNexus",
    page_icon="🌿",
    layout="wide",
)


@st.cache_resource
def _init_logging():
    setup_logging()
    return True


_init_logging()

theme = get_theme_context()
apply_css(theme.colors)

auth = get_auth_context()
if auth is None:
    st.stop()


# ============================================================================
# SIGNED OUT: SIGN IN / SIGN UP / RESET
# ============================================================================
def render_auth_forms():
    render_header("EcoNexus", "Track clean energy, environmental alerts and your community")
    offline_banner()

    tab_in, tab_up, tab_reset = st.tabs(["🔐 Sign in", "✨ Create account", "🔑 Reset password"])

    with tab_in:
        with st.form("sign_in_form"):
            email = st.text_input("Email", key="sign_in_email")
            password = st.text_input("Password", type="password", key="sign_in_password")
            submitted = st.form_submit_button("Sign in", use_container_width=True)
        if submitted:
            with st.spinner("Signing in..."):
                result = auth.sign_in(email, password)
            if result:
                st.rerun()
            else:
                st.error(error_message(result.error))

    with tab_up:
        with st.form("sign_up_form"):
            name = st.text_input("Full name (optional)")
            email = st.text_input("Email", key="sign_up_email")
            password = st.text_input("Password", type="password", key="sign_up_password",
                                     help="At least 6 characters")
            submitted = st.form_submit_button("Create account", use_container_width=True)
        if submitted:
            with st.spinner("Creating account..."):
                result = auth.sign_up(email, password, name or None)
            if result:
                st.success("Account created. Check your inbox to confirm your email.")
            else:
                st.error(error_message(result.error))

    with tab_reset:
        with st.form("reset_form"):
            email = st.text_input("Email", key="reset_email")
            submitted = st.form_submit_button("Send reset link", use_container_width=True)
        if submitted:
            result = auth.reset_password(email)
            if result:
                st.success("If that address has an account, a reset link is on its way.")
            else:
                st.error(error_message(result.error))


# ============================================================================
# SIGNED IN: HOME
# ============================================================================
def render_home():
    add_logout_button()

    profile = ProfileService(auth.client).fetch_profile(auth.user_id, auth.user)
    name = (profile.data or {}).get("full_name") or resolve_display_name(auth.user)
    render_header(f"Welcome back, {format_display_name(name)} 👋", "Here is your week at a glance")
    offline_banner()

    energy = EnergyService(auth.client).fetch_energy_readings("week", 7)
    alerts = AlertService(auth.client).fetch_alerts(limit=5)

    col_chart, col_alerts = st.columns([3, 2])

    with col_chart:
        st.markdown("### ⚡ Energy this week")
        frame = energy_chart_frame(energy.data or [])
        if frame.empty:
            st.info("No energy readings yet.")
        else:
            st.plotly_chart(energy_bar_chart(frame, dark=theme.is_dark), use_container_width=True)
        provenance_notice(energy, "energy readings")

    with col_alerts:
        count = unread_count(alerts.data or [])
        st.markdown(f"### 🔔 Recent alerts ({count} unread)")
        for alert in alerts.data or []:
            alert_card(alert)
        if not alerts.data:
            st.info("No alerts.")
        provenance_notice(alerts, "alerts")
        st.page_link("pages/02_Alerts.py", label="All alerts", icon="🔔")


if auth.loading:
    st.info("Loading session...")
elif auth.is_logged_in:
    render_home()
else:
    render_auth_forms()
