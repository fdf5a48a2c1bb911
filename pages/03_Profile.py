# =============================================================================
# 03_Profile.py - Profile, preferences and appearance
# =============================================================================
from __future__ import annotations
import streamlit as st

from eco_core.auth.navigation import require_authentication, add_logout_button
from eco_core.data.fallback import format_display_name
from eco_core.data.profile_service import ProfileService
from eco_core.ui.components import error_message, flash, format_timestamp, provenance_notice, show_flashes
from eco_core.ui.theme import ThemeMode, apply_css, get_theme_context, render_header

st.set_page_config(page_title="Profile - EcoNexus", page_icon="👤", layout="wide")

theme = get_theme_context()
apply_css(theme.colors)

auth = require_authentication()
add_logout_button()

service = ProfileService(auth.client)

# Profile is kept per session so memory-only preferences survive reruns
if st.session_state.get("profile_user") != auth.user_id:
    st.session_state["profile_user"] = auth.user_id
    st.session_state["profile_result"] = service.fetch_profile(auth.user_id, auth.user)

result = st.session_state["profile_result"]
profile = result.data or {}

render_header(
    f"👤 {format_display_name(profile.get('full_name') or '')}",
    f"Last updated {format_timestamp(profile.get('updated_at'))}" if profile.get("updated_at") else "",
)
provenance_notice(result, "profile")
show_flashes()

col_profile, col_prefs = st.columns([3, 2])

# =============================================================================
# PROFILE + PREFERENCES FORM
# =============================================================================
with col_profile:
    st.markdown("### Profile")
    with st.form("profile_form"):
        full_name = st.text_input("Full name", value=profile.get("full_name") or "")
        bio = st.text_area("Bio", value=profile.get("bio") or "", max_chars=280)
        st.markdown("**Preferences** (this device only)")
        notifications = st.toggle("Notifications", value=bool(profile.get("_notifications_enabled", True)))
        data_sharing = st.toggle("Share anonymous usage data", value=bool(profile.get("_data_sharing", False)))
        submitted = st.form_submit_button("Save changes")

    if submitted:
        updates = {
            "full_name": full_name.strip(),
            "bio": bio.strip(),
            "_notifications_enabled": notifications,
            "_data_sharing": data_sharing,
            "_dark_mode": theme.is_dark,
        }
        saved = service.update_profile(auth.user_id, updates, current=profile, user=auth.user)
        if not saved.success:
            st.error(error_message(saved.error))
        else:
            st.session_state["profile_result"] = saved
            if saved.metadata.get("persisted"):
                flash("success", "Profile saved.")
            else:
                flash("warning", "Saved on this device only: the profile could not be stored online.")
            st.rerun()

# =============================================================================
# APPEARANCE
# =============================================================================
with col_prefs:
    st.markdown("### Appearance")
    modes = [m.value for m in ThemeMode]
    choice = st.radio(
        "Theme",
        modes,
        index=modes.index(theme.mode.value),
        format_func=str.capitalize,
        horizontal=True,
    )
    if choice != theme.mode.value:
        theme.set_theme(choice)
        st.rerun()
    st.caption("System follows the app's configured base theme.")
