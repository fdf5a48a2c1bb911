# =============================================================================
# eco_core/data/realtime.py
# Change notifications for Supabase tables
# =============================================================================
"""
Table change subscriptions.

Primary path is a Supabase Realtime channel listening for postgres_changes.
When the realtime transport is not usable from the current client (the sync
SDK does not implement websocket channels in every release), the
subscription degrades to a polling watcher that re-queries the table and
fires the callback whenever the result changes.

Handlers are expected to re-run their fetch rather than patch local state,
so duplicate or coalesced notifications are harmless.
"""

from __future__ import annotations
import hashlib
import json
import threading
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from eco_core.logging import get_logger

logger = get_logger(__name__)

ChangeCallback = Callable[[Dict[str, Any]], None]


class ChangeEvent(Enum):
    """Postgres change kinds a channel can listen for."""
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    ALL = "*"


def _normalize_event(event) -> str:
    if isinstance(event, ChangeEvent):
        return event.value
    value = str(event).upper()
    valid = {e.value for e in ChangeEvent}
    if value not in valid:
        raise ValueError(f"Unknown change event {event!r}; expected one of {sorted(valid)}")
    return value


class Subscription:
    """Base handle returned by subscribe_to_table."""

    mode = "none"

    def __init__(self, table: str, event: str):
        self.table = table
        self.event = event
        self.active = True

    def unsubscribe(self) -> None:
        self.active = False


class RealtimeSubscription(Subscription):
    """Subscription backed by a Supabase Realtime channel."""

    mode = "realtime"

    def __init__(self, client, channel, table: str, event: str):
        super().__init__(table, event)
        self._client = client
        self._channel = channel

    def unsubscribe(self) -> None:
        if not self.active:
            return
        try:
            self._client.remove_channel(self._channel)
        except Exception as e:
            logger.debug(f"Error removing channel for {self.table}: {e}")
        super().unsubscribe()
        logger.info(f"Realtime subscription closed: {self.table}")


class PollingSubscription(Subscription):
    """
    Subscription that polls the table and reports changes.

    The first poll only records a baseline; later polls fire the callback
    once per observed change.
    """

    mode = "polling"

    DEFAULT_INTERVAL = 15.0  # seconds
    POLL_LIMIT = 200

    def __init__(
        self,
        client,
        table: str,
        callback: ChangeCallback,
        event: str = "*",
        interval: float = DEFAULT_INTERVAL,
        start: bool = True,
    ):
        super().__init__(table, event)
        self._client = client
        self._callback = callback
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._fingerprint: Optional[str] = None
        if start:
            self.start()

    def _current_fingerprint(self) -> Optional[str]:
        try:
            response = (
                self._client.table(self.table)
                .select("*")
                .limit(self.POLL_LIMIT)
                .execute()
            )
        except Exception as e:
            logger.debug(f"Poll of {self.table} failed: {e}")
            return None
        encoded = json.dumps(response.data or [], sort_keys=True, default=str)
        return hashlib.sha1(encoded.encode("utf-8")).hexdigest()

    def poll_once(self) -> bool:
        """
        Query the table once.

        Returns:
            True if a change was detected and the callback invoked
        """
        fingerprint = self._current_fingerprint()
        if fingerprint is None:
            return False
        if self._fingerprint is None:
            self._fingerprint = fingerprint
            return False
        if fingerprint == self._fingerprint:
            return False

        self._fingerprint = fingerprint
        payload = {
            "schema": "public",
            "table": self.table,
            "eventType": "*",
            "new": {},
            "old": {},
        }
        try:
            self._callback(payload)
        except Exception as e:
            logger.error(f"Error in change callback for {self.table}: {e}")
        return True

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop,
            daemon=True,
            name=f"TableWatcher-{self.table}",
        )
        self._thread.start()
        logger.info(f"Polling subscription started: {self.table} every {self.interval}s")

    def _loop(self) -> None:
        self.poll_once()
        while not self._stop.wait(timeout=self.interval):
            self.poll_once()

    def unsubscribe(self) -> None:
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=5)
        super().unsubscribe()
        logger.info(f"Polling subscription closed: {self.table}")


def subscribe_to_table(
    client,
    table: str,
    callback: ChangeCallback,
    event="*",
    channel_name: Optional[str] = None,
    poll_interval: float = PollingSubscription.DEFAULT_INTERVAL,
) -> Subscription:
    """
    Invoke callback for each change to a table.

    Args:
        client: Supabase client
        table: Table name in the public schema
        callback: Receives the change payload dict
        event: "INSERT", "UPDATE", "DELETE" or "*" (or a ChangeEvent)
        channel_name: Realtime channel name (default: "<table>_changes")
        poll_interval: Seconds between polls if realtime is unavailable

    Returns:
        Subscription with unsubscribe()
    """
    event = _normalize_event(event)
    channel_name = channel_name or f"{table}_changes"

    def _deliver(payload):
        try:
            callback(payload)
        except Exception as e:
            logger.error(f"Error in change callback for {table}: {e}")

    try:
        channel = client.channel(channel_name)
        channel.on_postgres_changes(
            event=event,
            schema="public",
            table=table,
            callback=_deliver,
        )
        channel.subscribe()
        logger.info(f"Realtime subscription opened: {channel_name} ({event})")
        return RealtimeSubscription(client, channel, table, event)

    except Exception as e:
        logger.warning(f"Realtime unavailable for {table} ({e}); falling back to polling")
        return PollingSubscription(client, table, callback, event=event, interval=poll_interval)


class ChangeCounter:
    """
    Thread-safe tally of change notifications.

    A single counter is shared across browser sessions; each session keeps
    the last count it rendered and refetches when the tally moves.
    """

    def __init__(self):
        self._count = 0
        self._lock = threading.Lock()

    def __call__(self, payload=None) -> None:
        with self._lock:
            self._count += 1

    @property
    def count(self) -> int:
        return self._count


def watch_table(
    client,
    table: str,
    event="*",
    poll_interval: float = PollingSubscription.DEFAULT_INTERVAL,
) -> Tuple[ChangeCounter, Subscription]:
    """Subscribe a fresh ChangeCounter to a table."""
    counter = ChangeCounter()
    subscription = subscribe_to_table(client, table, counter, event=event, poll_interval=poll_interval)
    return counter, subscription
