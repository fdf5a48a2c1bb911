# =============================================================================
# eco_core/offline/connection_manager.py
# Network Reachability Probe
# =============================================================================
"""
ConnectionManager - reports whether the device can reach the internet.

A HEAD request with a fixed timeout is the only backend-adjacent call in the
app that is bounded in time; everything else waits on the SDK. Views use the
status to show an offline banner (sign-in form, home screen).

Features:
- Single probe with a 5 second abort
- Status-change logging
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional
import logging

import requests

logger = logging.getLogger(__name__)


class ConnectionStatus(Enum):
    """Connection status states."""
    ONLINE = "online"
    OFFLINE = "offline"
    CHECKING = "checking"
    UNKNOWN = "unknown"


@dataclass
class ConnectionState:
    """Current connection state with metadata."""
    status: ConnectionStatus = ConnectionStatus.UNKNOWN
    last_check: Optional[datetime] = None
    last_online: Optional[datetime] = None
    consecutive_failures: int = 0
    error_message: Optional[str] = None


class ConnectionManager:
    """
    Reachability probe.

    Usage:
        manager = get_connection_manager()
        if manager.check_connection().status != ConnectionStatus.ONLINE:
            st.warning("You appear to be offline")
    """

    DEFAULT_PROBE_URL = "https://www.google.com"
    CONNECTION_TIMEOUT = 5.0       # Seconds before the probe is abandoned

    def __init__(
        self,
        probe_url: str = DEFAULT_PROBE_URL,
        timeout: float = CONNECTION_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.probe_url = probe_url
        self.timeout = timeout
        self._session = session or requests.Session()
        self._state = ConnectionState()

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def status(self) -> ConnectionStatus:
        return self._state.status

    @property
    def is_online(self) -> bool:
        return self._state.status == ConnectionStatus.ONLINE

    def _probe(self) -> bool:
        try:
            response = self._session.head(self.probe_url, timeout=self.timeout, allow_redirects=True)
            return response.ok
        except requests.RequestException as e:
            self._state.error_message = str(e)
            logger.info(f"Connectivity check failed: {e}")
            return False

    def check_connection(self) -> ConnectionState:
        """
        Probe once and update state.

        Returns:
            Updated ConnectionState
        """
        old_status = self._state.status
        self._state.status = ConnectionStatus.CHECKING
        self._state.last_check = datetime.now()

        if self._probe():
            self._state.status = ConnectionStatus.ONLINE
            self._state.last_online = datetime.now()
            self._state.consecutive_failures = 0
            self._state.error_message = None
        else:
            self._state.status = ConnectionStatus.OFFLINE
            self._state.consecutive_failures += 1

        if old_status != self._state.status:
            logger.info(f"Connection status changed: {old_status.value} -> {self._state.status.value}")

        return self._state


_connection_manager: Optional[ConnectionManager] = None


def get_connection_manager() -> ConnectionManager:
    """Get the global ConnectionManager instance."""
    global _connection_manager
    if _connection_manager is None:
        _connection_manager = ConnectionManager()
    return _connection_manager
