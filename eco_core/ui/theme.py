"""
Theme state for EcoNexus.

ThemeContext resolves the effective palette from the stored preference
(light / dark / system) and, for "system", the scheme reported by the
host. Preference changes are persisted best-effort: a failed write is
logged and the in-memory mode still changes.
"""

from __future__ import annotations
import html
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Callable, Optional

import streamlit as st

from eco_core.errors import ValidationError
from eco_core.logging import get_logger
from eco_core.storage import THEME_STORAGE_KEY

logger = get_logger(__name__)


class ThemeMode(Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


@dataclass(frozen=True)
class ThemeColors:
    primary: str
    secondary: str
    background: str
    card: str
    text: str
    secondary_text: str
    accent: str
    border: str
    success: str
    error: str
    warning: str
    info: str
    input_background: str
    elevated: str
    profile_gradient_start: str
    profile_gradient_end: str

    def to_dict(self) -> dict:
        return asdict(self)


LIGHT_THEME = ThemeColors(
    primary="#22C55E",
    secondary="#0EA5E9",
    background="#F9FAFB",
    card="#FFFFFF",
    text="#111827",
    secondary_text="#6B7280",
    accent="#8B5CF6",
    border="#E5E7EB",
    success="#22C55E",
    error="#EF4444",
    warning="#F59E0B",
    info="#3B82F6",
    input_background="#FFFFFF",
    elevated="#FFFFFF",
    profile_gradient_start="#22C55E",
    profile_gradient_end="#059669",
)

DARK_THEME = ThemeColors(
    primary="#10B981",
    secondary="#0284C7",
    background="#111827",
    card="#1F2937",
    text="#F9FAFB",
    secondary_text="#9CA3AF",
    accent="#A78BFA",
    border="#374151",
    success="#10B981",
    error="#F87171",
    warning="#FBBF24",
    info="#60A5FA",
    input_background="#1F2937",
    elevated="#2D3748",
    profile_gradient_start="#065F46",
    profile_gradient_end="#064E3B",
)


def parse_mode(value) -> Optional[ThemeMode]:
    """ThemeMode for a stored string, or None if unrecognised."""
    if isinstance(value, ThemeMode):
        return value
    try:
        return ThemeMode(str(value).lower())
    except ValueError:
        return None


def streamlit_system_scheme() -> Optional[str]:
    """Base theme configured for the Streamlit host ("light", "dark" or None)."""
    try:
        return st.get_option("theme.base")
    except Exception:
        return None


class ThemeContext:
    """
    Effective palette from a stored preference plus the host scheme.

    Args:
        store: Key-value store with get_item / set_item
        system_scheme: Callable returning "light", "dark" or None
    """

    def __init__(self, store, system_scheme: Callable[[], Optional[str]] = streamlit_system_scheme):
        self.store = store
        self.system_scheme = system_scheme
        self.mode = ThemeMode.SYSTEM

    def load(self) -> ThemeMode:
        """Apply the saved preference; invalid or missing values keep the default."""
        try:
            saved = parse_mode(self.store.get_item(THEME_STORAGE_KEY))
            if saved is not None:
                self.mode = saved
        except Exception as e:
            logger.error(f"Error loading theme preference: {e}")
        return self.mode

    def set_theme(self, mode) -> ThemeMode:
        """
        Switch mode now and persist it best-effort.

        Raises:
            ValidationError: mode is not light, dark or system
        """
        parsed = parse_mode(mode)
        if parsed is None:
            raise ValidationError(
                "Unknown theme mode",
                field="mode",
                expected="light, dark, system",
                actual=str(mode),
            )

        self.mode = parsed
        try:
            self.store.set_item(THEME_STORAGE_KEY, parsed.value)
        except Exception as e:
            logger.error(f"Error saving theme preference: {e}")
        return self.mode

    @property
    def is_dark(self) -> bool:
        if self.mode is ThemeMode.DARK:
            return True
        return self.mode is ThemeMode.SYSTEM and self.system_scheme() == "dark"

    @property
    def colors(self) -> ThemeColors:
        return DARK_THEME if self.is_dark else LIGHT_THEME


def get_theme_context() -> ThemeContext:
    """This session's ThemeContext (created and loaded once)."""
    if "theme_context" not in st.session_state:
        from eco_core.auth.navigation import get_session_store
        context = ThemeContext(get_session_store())
        context.load()
        st.session_state["theme_context"] = context
    return st.session_state["theme_context"]


def apply_css(colors: Optional[ThemeColors] = None):
    """Render the palette as page CSS."""
    c = colors or get_theme_context().colors
    st.markdown(f"""
        <style>
        .stApp {{
            background-color: {c.background};
            color: {c.text};
            font-family: 'Inter','Segoe UI',sans-serif;
        }}
        .eco-header {{
            background: linear-gradient(135deg, {c.profile_gradient_start} 0%, {c.profile_gradient_end} 100%);
            padding: 1.6rem; border-radius: 16px; margin-bottom: 1.5rem; color: white;
        }}
        .eco-card {{
            background: {c.card}; padding: 1.1rem; border-radius: 14px; margin: .6rem 0;
            border: 1px solid {c.border}; box-shadow: 0 4px 8px rgba(0,0,0,0.06);
        }}
        .eco-card.unread {{ border-left: 4px solid {c.primary}; }}
        .eco-muted {{ color: {c.secondary_text}; font-size: .85rem; }}
        .severity-high {{ color: {c.error}; font-weight: 600; }}
        .severity-medium {{ color: {c.warning}; font-weight: 600; }}
        .severity-low {{ color: {c.info}; font-weight: 600; }}
        .stButton button {{
            background: {c.primary}; color: white; border: none; border-radius: 10px;
            padding: .48rem 1.2rem; font-weight: 600;
        }}
        h1,h2,h3,h4 {{ color: {c.text}; font-weight: 600; }}
        h3 {{ color: {c.primary}; }}
        [data-testid="stSidebar"] {{ background-color: {c.card}; border-right: 1px solid {c.border}; }}
        </style>
    """, unsafe_allow_html=True)


def render_header(title: str, subtitle: str = ""):
    st.markdown(
        f"<div class='eco-header'><h2 style='color:white;margin:0'>{html.escape(title)}</h2>"
        f"<div>{html.escape(subtitle)}</div></div>",
        unsafe_allow_html=True,
    )
