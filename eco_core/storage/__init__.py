# =============================================================================
# eco_core/storage/__init__.py
# Local persistence for session tokens and preferences
# =============================================================================

from .local_store import (
    LocalKeyValueStore,
    NamespacedStore,
    get_local_store,
    SESSION_STORAGE_KEY,
    THEME_STORAGE_KEY,
)

__all__ = [
    "LocalKeyValueStore",
    "NamespacedStore",
    "get_local_store",
    "SESSION_STORAGE_KEY",
    "THEME_STORAGE_KEY",
]
