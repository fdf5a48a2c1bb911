"""
Small Streamlit widgets shared by the EcoNexus pages.
"""
from __future__ import annotations
import html
from datetime import datetime
from typing import Any, Dict

import streamlit as st

from eco_core.data.fallback import ALERT_SEVERITIES
from eco_core.errors import EcoNexusError
from eco_core.offline import ConnectionStatus, get_connection_manager
from eco_core.services import ServiceResult


def provenance_notice(result: ServiceResult, what: str = "data"):
    """Caption under a widget whose data was generated locally."""
    if result.is_synthesized:
        st.caption(f"⚠️ Showing sample {what}: the live backend could not be reached.")


def error_message(error) -> str:
    if isinstance(error, EcoNexusError):
        return error.message
    return str(error) if error else "Unknown error"


def offline_banner():
    """Warn once per run when the reachability probe fails."""
    state = get_connection_manager().check_connection()
    if state.status != ConnectionStatus.ONLINE:
        st.warning("📡 You appear to be offline. Live data may be unavailable.")
    return state


def format_timestamp(value: Any) -> str:
    if not value:
        return ""
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return str(value)
    return parsed.strftime("%b %d, %H:%M")


def _text(value: Any) -> str:
    """Escape backend or user text for the HTML cards."""
    return html.escape(str(value)) if value is not None else ""


def alert_card_html(alert: Dict[str, Any]) -> str:
    severity = alert.get("severity") if alert.get("severity") in ALERT_SEVERITIES else "low"
    unread = "" if alert.get("is_read") else " unread"
    return f"""
        <div class='eco-card{unread}'>
            <div><strong>{_text(alert.get('title', 'Alert'))}</strong>
            <span class='severity-{severity}'> · {severity.upper()}</span></div>
            <div>{_text(alert.get('description', ''))}</div>
            <div class='eco-muted'>{_text(alert.get('source', ''))} · {_text(format_timestamp(alert.get('created_at')))}</div>
        </div>
        """


def scan_card_html(scan: Dict[str, Any]) -> str:
    return (
        f"<div class='eco-card'><strong>{_text(scan.get('location_name', ''))}</strong> · "
        f"{_text(scan.get('scan_type', ''))}<div>{_text(scan.get('notes'))}</div>"
        f"<div class='eco-muted'>{_text(format_timestamp(scan.get('created_at')))}</div></div>"
    )


def post_card_html(post: Dict[str, Any]) -> str:
    liked = "💚" if post.get("liked") else "🤍"
    return (
        f"<div class='eco-card'><div>{_text(post.get('content', ''))}</div>"
        f"<div class='eco-muted'>{liked} {int(post.get('likes_count') or 0)} · "
        f"{_text(format_timestamp(post.get('created_at')))}</div></div>"
    )


def alert_card(alert: Dict[str, Any]):
    st.markdown(alert_card_html(alert), unsafe_allow_html=True)


def scan_card(scan: Dict[str, Any]):
    st.markdown(scan_card_html(scan), unsafe_allow_html=True)


def post_card(post: Dict[str, Any]):
    st.markdown(post_card_html(post), unsafe_allow_html=True)


FLASH_KEY = "flash_messages"


def flash(level: str, message: str, key: str = FLASH_KEY):
    """Queue a message to show after the next st.rerun()."""
    st.session_state.setdefault(key, []).append((level, message))


def show_flashes(key: str = FLASH_KEY):
    """Render and clear queued messages; level is success, info, warning or error."""
    for level, message in st.session_state.pop(key, []):
        getattr(st, level, st.info)(message)
