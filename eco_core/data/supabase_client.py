# =============================================================================
# eco_core/data/supabase_client.py
# Supabase Client Configuration for EcoNexus
# Handles the shared client handle and generic resource operations
# =============================================================================

from __future__ import annotations
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Dict, Any, List, Union, Callable

from supabase import create_client, Client, ClientOptions

from eco_core.errors import EcoNexusError, ConfigurationError, classify_backend_error
from eco_core.logging import get_logger
from eco_core.storage import LocalKeyValueStore, get_local_store

logger = get_logger(__name__)


@dataclass
class BackendSettings:
    """Endpoint and public key for the hosted backend."""
    url: str
    key: str
    storage_path: Optional[Path] = None


def _read_streamlit_secrets() -> Dict[str, Any]:
    """
    Read the [supabase] table from .streamlit/secrets.toml, if any.

    Expects:
        [supabase]
        url = "https://your-project.supabase.co"
        key = "your-anon-key"
    """
    try:
        import streamlit as st
        if "supabase" in st.secrets:
            return dict(st.secrets["supabase"])
    except Exception as e:
        # No secrets file outside a configured Streamlit deployment
        logger.debug(f"Streamlit secrets unavailable: {e}")
    return {}


def load_backend_settings() -> BackendSettings:
    """
    Resolve backend settings from the environment, then Streamlit secrets.

    Environment variables:
        SUPABASE_URL, SUPABASE_KEY, ECONEXUS_STORAGE_PATH

    Raises:
        ConfigurationError: URL or key missing from both sources
    """
    secrets = _read_streamlit_secrets()
    url = os.getenv("SUPABASE_URL") or secrets.get("url")
    key = os.getenv("SUPABASE_KEY") or secrets.get("key")
    storage_path = os.getenv("ECONEXUS_STORAGE_PATH")

    if not url:
        raise ConfigurationError("Supabase URL is not configured", config_key="SUPABASE_URL")
    if not key:
        raise ConfigurationError("Supabase key is not configured", config_key="SUPABASE_KEY")

    return BackendSettings(
        url=url,
        key=key,
        storage_path=Path(storage_path) if storage_path else None,
    )


def create_backend_client(
    settings: Optional[BackendSettings] = None,
    storage=None,
) -> Client:
    """
    Create a Supabase client that persists its session in the local store.

    Args:
        settings: Endpoint and key (default: load_backend_settings())
        storage: Session token store with get_item/set_item/remove_item
            (default: the shared LocalKeyValueStore)

    Returns:
        Configured supabase Client
    """
    settings = settings or load_backend_settings()
    if storage is None:
        storage = (
            LocalKeyValueStore(settings.storage_path)
            if settings.storage_path else get_local_store()
        )

    options = ClientOptions(
        storage=storage,
        auto_refresh_token=True,
        persist_session=True,
    )
    client = create_client(settings.url, settings.key, options=options)
    logger.info(f"Supabase client created for {settings.url}")
    return client


# Shared client handle
_backend_client: Optional[Client] = None
_client_lock = threading.Lock()


def get_backend_client() -> Client:
    """
    Get the shared Supabase client, creating it on first use.

    Nobody signs in on this client; it serves process-wide, user-agnostic
    work such as the alerts change feed. Signed-in pages use the client of
    their own AuthContext.

    Raises:
        ConfigurationError: settings missing
    """
    global _backend_client
    if _backend_client is None:
        with _client_lock:
            if _backend_client is None:
                _backend_client = create_backend_client()
    return _backend_client


def set_backend_client(client: Optional[Client]) -> None:
    """Install a client as the shared handle (used by tests and app startup)."""
    global _backend_client
    with _client_lock:
        _backend_client = client


def reset_backend_client() -> None:
    """
    Drop the shared handle, closing realtime channels first.
    """
    global _backend_client
    with _client_lock:
        client, _backend_client = _backend_client, None
    if client is None:
        return
    try:
        client.remove_all_channels()
    except Exception as e:
        logger.debug(f"Ignoring channel cleanup error: {e}")


@dataclass
class QueryResponse:
    """Result of a generic resource call: rows or an error, never both."""
    data: List[Dict[str, Any]] = field(default_factory=list)
    error: Optional[EcoNexusError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SupabaseService:
    """
    Generic resource access for one table.

    Every method returns a QueryResponse; nothing raises past this class.
    """

    def __init__(self, table_name: str, client: Optional[Client] = None):
        """
        Initialize service for a specific table.

        Args:
            table_name: Name of the Supabase table
            client: Client handle (default: the shared handle, resolved lazily)
        """
        self.table_name = table_name
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_backend_client()
        return self._client

    def is_connected(self) -> bool:
        """Check if a client handle can be obtained."""
        try:
            return self.client is not None
        except EcoNexusError:
            return False

    def _failure(self, operation: str, error: Exception) -> QueryResponse:
        classified = classify_backend_error(error, resource=self.table_name)
        logger.error(f"Error during {operation} on {self.table_name}: {classified}")
        return QueryResponse(error=classified)

    def select(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[int] = None,
        gte: Optional[Dict[str, Any]] = None,
        lte: Optional[Dict[str, Any]] = None,
        ilike: Optional[Dict[str, str]] = None,
        columns: str = "*",
    ) -> QueryResponse:
        """
        Fetch rows from the table.

        Args:
            filters: Equality filters (column -> value)
            order_by: Column to order by (optional)
            ascending: Sort order (default: ascending)
            limit: Maximum number of rows
            gte / lte: Range filters (column -> bound)
            ilike: Case-insensitive pattern filters (column -> pattern)
            columns: Select expression (default "*")

        Returns:
            QueryResponse with rows, or with error set
        """
        try:
            query = self.client.table(self.table_name).select(columns)

            for col, val in (filters or {}).items():
                query = query.eq(col, val)
            for col, val in (gte or {}).items():
                query = query.gte(col, val)
            for col, val in (lte or {}).items():
                query = query.lte(col, val)
            for col, pattern in (ilike or {}).items():
                query = query.ilike(col, pattern)

            if order_by:
                query = query.order(order_by, desc=not ascending)
            if limit is not None:
                query = query.limit(limit)

            response = query.execute()
            return QueryResponse(data=list(response.data or []))

        except Exception as e:
            return self._failure("select", e)

    def insert(self, data: Union[Dict[str, Any], List[Dict[str, Any]]]) -> QueryResponse:
        """Insert one record or a list of records."""
        try:
            response = self.client.table(self.table_name).insert(data).execute()
            return QueryResponse(data=list(response.data or []))
        except Exception as e:
            return self._failure("insert", e)

    def update(self, filters: Dict[str, Any], data: Dict[str, Any]) -> QueryResponse:
        """Update records matching equality filters."""
        try:
            query = self.client.table(self.table_name).update(data)
            for col, val in filters.items():
                query = query.eq(col, val)
            response = query.execute()
            return QueryResponse(data=list(response.data or []))
        except Exception as e:
            return self._failure("update", e)

    def upsert(self, data: Dict[str, Any]) -> QueryResponse:
        """Insert or update a record (must include primary key)."""
        try:
            response = self.client.table(self.table_name).upsert(data).execute()
            return QueryResponse(data=list(response.data or []))
        except Exception as e:
            return self._failure("upsert", e)

    def delete(self, filters: Dict[str, Any]) -> QueryResponse:
        """Delete records matching equality filters."""
        try:
            query = self.client.table(self.table_name).delete()
            for col, val in filters.items():
                query = query.eq(col, val)
            response = query.execute()
            return QueryResponse(data=list(response.data or []))
        except Exception as e:
            return self._failure("delete", e)

    def subscribe(
        self,
        callback: Callable[[Dict[str, Any]], None],
        event: str = "*",
        channel_name: Optional[str] = None,
    ):
        """
        Invoke callback on every change to the table.

        Returns:
            Subscription with unsubscribe()
        """
        from eco_core.data.realtime import subscribe_to_table
        return subscribe_to_table(
            self.client,
            self.table_name,
            callback,
            event=event,
            channel_name=channel_name,
        )
