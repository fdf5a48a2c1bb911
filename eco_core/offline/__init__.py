# =============================================================================
# eco_core/offline/__init__.py
# Connectivity detection for EcoNexus
# =============================================================================

from eco_core.offline.connection_manager import (
    ConnectionManager,
    ConnectionStatus,
    ConnectionState,
    get_connection_manager,
)

__all__ = [
    "ConnectionManager",
    "ConnectionStatus",
    "ConnectionState",
    "get_connection_manager",
]
