"""
Authentication for EcoNexus.

AuthContext wraps Supabase Auth (sign-in, sign-up, password reset,
sign-out) and tracks the current session; the navigation helpers bind one
context to each Streamlit session.
"""

from .session import AuthContext, AuthResult, AuthState

__all__ = [
    "AuthContext",
    "AuthResult",
    "AuthState",
]
