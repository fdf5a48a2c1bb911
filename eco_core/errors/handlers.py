# =============================================================================
# eco_core/errors/handlers.py
# Error Handling Utilities for EcoNexus
# =============================================================================

from __future__ import annotations
import functools
import traceback
from typing import Optional, Callable, TypeVar, Any

import httpx
import requests
import streamlit as st
from postgrest.exceptions import APIError

from eco_core.logging import get_logger
from .exceptions import (
    EcoNexusError,
    BackendError,
    ResourceNotFoundError,
    NetworkError,
)

logger = get_logger(__name__)

T = TypeVar("T")

NETWORK_FAILURE_MESSAGE = (
    "Network connection failed. Please check your internet connection and try again."
)

# PostgREST / Postgres codes meaning "the table or row is not there"
MISSING_RESOURCE_CODES = {"42P01", "PGRST205", "PGRST116", "PGRST200"}
MISSING_RESOURCE_MARKERS = ("does not exist", "could not find the table", "schema cache")

NETWORK_MARKERS = ("network", "fetch")


def is_network_error(error: BaseException) -> bool:
    """
    Heuristic check for transport-level failures.

    Matches httpx/requests connection errors, or any error whose text
    mentions "network" or "fetch".
    """
    if isinstance(error, NetworkError):
        return True
    if isinstance(error, (httpx.TransportError, requests.ConnectionError)):
        return True
    text = str(getattr(error, "message", None) or error).lower()
    return any(marker in text for marker in NETWORK_MARKERS)


def classify_backend_error(
    error: BaseException,
    resource: Optional[str] = None,
) -> EcoNexusError:
    """
    Map an exception raised by the Supabase SDK onto the EcoNexus hierarchy.

    Args:
        error: Exception raised by a query, write or auth call
        resource: Table name the call targeted, if any

    Returns:
        EcoNexusError subclass instance (never raises)
    """
    if isinstance(error, EcoNexusError):
        return error

    if isinstance(error, APIError):
        code = getattr(error, "code", None)
        message = getattr(error, "message", None) or str(error)
        lowered = message.lower()
        if code in MISSING_RESOURCE_CODES or any(m in lowered for m in MISSING_RESOURCE_MARKERS):
            return ResourceNotFoundError(message, resource=resource, backend_code=code)
        return BackendError(message, resource=resource, backend_code=code)

    if is_network_error(error):
        return NetworkError(NETWORK_FAILURE_MESSAGE, cause=str(error))

    message = str(error) or error.__class__.__name__
    if any(m in message.lower() for m in MISSING_RESOURCE_MARKERS):
        return ResourceNotFoundError(message, resource=resource)
    return BackendError(message, resource=resource)


def handle_error(
    error: Exception,
    show_user_message: bool = True,
    log_error: bool = True,
    user_message: Optional[str] = None,
) -> None:
    """
    Centralized error handling for view code.

    Args:
        error: The exception to handle
        show_user_message: Whether to display error to user via st.error
        log_error: Whether to log the error
        user_message: Custom message to show user (uses error message if None)
    """
    if isinstance(error, EcoNexusError):
        message = user_message or error.message
        code = error.code
        details = error.details
        recoverable = error.recoverable
    else:
        message = user_message or str(error)
        code = "UNKNOWN"
        details = {"traceback": traceback.format_exc()}
        recoverable = True

    if log_error:
        logger.error(
            f"[{code}] {message}",
            extra={"details": details},
            exc_info=True,
        )

    if show_user_message:
        if recoverable:
            st.error(f"Error: {message}")
        else:
            st.error(f"Critical Error: {message}. Please contact support.")

        if details and st.session_state.get("debug_mode", False):
            with st.expander("Error Details", expanded=False):
                st.json(details)


def error_boundary(
    default_return: Any = None,
    error_message: Optional[str] = None,
    log: bool = True,
):
    """
    Decorator to wrap view functions with error handling.

    Usage:
        @error_boundary(default_return=None, error_message="Map failed to render")
        def render_map(zones):
            ...
    """
    def decorator(func: Callable[..., T]) -> Callable[..., Optional[T]]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Optional[T]:
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if log:
                    logger.error(
                        f"Error in {func.__name__}: {e}",
                        exc_info=True,
                    )
                if error_message:
                    st.error(error_message)
                return default_return

        return wrapper

    return decorator
