# =============================================================================
# eco_core/errors/__init__.py
# Centralized Error Handling for EcoNexus
# =============================================================================

from .exceptions import (
    EcoNexusError,
    BackendError,
    ResourceNotFoundError,
    NetworkError,
    AuthError,
    ValidationError,
    ConfigurationError,
)

from .handlers import (
    NETWORK_FAILURE_MESSAGE,
    is_network_error,
    classify_backend_error,
    handle_error,
    error_boundary,
)

__all__ = [
    # Exceptions
    "EcoNexusError",
    "BackendError",
    "ResourceNotFoundError",
    "NetworkError",
    "AuthError",
    "ValidationError",
    "ConfigurationError",
    # Handlers
    "NETWORK_FAILURE_MESSAGE",
    "is_network_error",
    "classify_backend_error",
    "handle_error",
    "error_boundary",
]
