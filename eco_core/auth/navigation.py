"""
Streamlit glue for the auth context.

One AuthContext is kept per browser session in st.session_state; pages call
require_authentication() at the top and add_logout_button() in the sidebar.
Each browser session owns its Supabase client and a namespaced slice of the
local store, so one visitor's sign-in never leaks into another's.
"""

import uuid

import streamlit as st

from eco_core.data.fallback import format_display_name, resolve_display_name
from eco_core.data.supabase_client import create_backend_client
from eco_core.errors import EcoNexusError, handle_error
from eco_core.storage import NamespacedStore, get_local_store
from .session import AuthContext

AUTH_CONTEXT_KEY = "auth_context"
SESSION_ID_KEY = "econexus_session_id"


def session_namespace() -> str:
    """Stable random id for the current browser session."""
    if SESSION_ID_KEY not in st.session_state:
        st.session_state[SESSION_ID_KEY] = uuid.uuid4().hex
    return st.session_state[SESSION_ID_KEY]


def get_session_store() -> NamespacedStore:
    """The local store, scoped to the current browser session."""
    return NamespacedStore(get_local_store(), session_namespace())


def create_session_auth(namespace, store=None, client_factory=create_backend_client) -> AuthContext:
    """
    Build an initialized AuthContext with its own client and token storage.

    Args:
        namespace: Key prefix isolating this session in the local store
        store: Underlying LocalKeyValueStore (default: the shared one)
        client_factory: Called with storage=... to create the Supabase client

    Raises:
        ConfigurationError: backend settings missing
    """
    storage = NamespacedStore(store if store is not None else get_local_store(), namespace)
    context = AuthContext(client_factory(storage=storage), storage=storage)
    context.initialize()
    return context


def get_auth_context():
    """
    Return this session's AuthContext, creating and initializing it once.

    Returns None when the backend is not configured (error already shown).
    """
    if AUTH_CONTEXT_KEY not in st.session_state:
        try:
            context = create_session_auth(session_namespace())
        except EcoNexusError as e:
            handle_error(e)
            return None
        st.session_state[AUTH_CONTEXT_KEY] = context
    return st.session_state[AUTH_CONTEXT_KEY]


def require_authentication():
    """
    Stop the page unless a user is signed in.

    Returns:
        The AuthContext for a signed-in user
    """
    auth = get_auth_context()
    if auth is None or not auth.is_logged_in:
        st.warning("Please sign in on the Welcome page to continue.")
        st.page_link("Welcome.py", label="Go to sign in", icon="🔐")
        st.stop()
    return auth


def add_logout_button():
    """Show the signed-in user and a sign-out button in the sidebar."""
    auth = st.session_state.get(AUTH_CONTEXT_KEY)
    if auth is None or not auth.is_logged_in:
        return

    with st.sidebar:
        st.caption(f"Signed in as **{format_display_name(resolve_display_name(auth.user))}**")
        if st.button("Sign out", use_container_width=True):
            result = auth.sign_out()
            if not result:
                st.error(result.error.message if isinstance(result.error, EcoNexusError) else str(result.error))
            st.rerun()
