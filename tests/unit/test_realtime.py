# =============================================================================
# tests/unit/test_realtime.py
# Unit Tests for table change subscriptions
# =============================================================================

import threading

import pytest
import streamlit as st
from unittest.mock import MagicMock

from eco_core.data.realtime import (
    ChangeCounter,
    ChangeEvent,
    PollingSubscription,
    RealtimeSubscription,
    subscribe_to_table,
    watch_table,
)
from tests.conftest import FakeSupabaseClient


class TestRealtimeChannel:

    def test_channel_subscription(self, mock_supabase):
        callback = MagicMock()
        channel = mock_supabase.channel.return_value

        sub = subscribe_to_table(mock_supabase, "alerts", callback, event=ChangeEvent.INSERT)

        assert isinstance(sub, RealtimeSubscription)
        mock_supabase.channel.assert_called_once_with("alerts_changes")
        kwargs = channel.on_postgres_changes.call_args.kwargs
        assert kwargs["event"] == "INSERT"
        assert kwargs["schema"] == "public"
        assert kwargs["table"] == "alerts"
        channel.subscribe.assert_called_once()

        # Callback errors never escape the delivery wrapper
        callback.side_effect = RuntimeError("boom")
        kwargs["callback"]({"eventType": "INSERT"})
        callback.assert_called_once_with({"eventType": "INSERT"})

        sub.unsubscribe()
        mock_supabase.remove_channel.assert_called_once_with(channel)
        assert not sub.active

    def test_unknown_event_rejected(self, mock_supabase):
        with pytest.raises(ValueError):
            subscribe_to_table(mock_supabase, "alerts", MagicMock(), event="UPSERT")


class TestPollingFallback:

    def test_falls_back_without_channel_support(self):
        # FakeSupabaseClient has no channel() so realtime setup fails
        client = FakeSupabaseClient()

        sub = subscribe_to_table(client, "alerts", MagicMock(), poll_interval=3600)
        try:
            assert isinstance(sub, PollingSubscription)
            assert sub.mode == "polling"
        finally:
            sub.unsubscribe()
        assert not sub.active

    def test_poll_once_reports_changes(self):
        client = FakeSupabaseClient(rows={"alerts": [{"id": "a1"}]})
        callback = MagicMock()
        sub = PollingSubscription(client, "alerts", callback, start=False)

        assert sub.poll_once() is False          # baseline
        assert sub.poll_once() is False          # unchanged
        client.rows["alerts"] = [{"id": "a1"}, {"id": "a2"}]
        assert sub.poll_once() is True

        payload = callback.call_args.args[0]
        assert payload["table"] == "alerts"
        assert payload["schema"] == "public"
        callback.assert_called_once()

    def test_poll_errors_ignored(self, network_error):
        client = FakeSupabaseClient(errors={"alerts": network_error})
        callback = MagicMock()
        sub = PollingSubscription(client, "alerts", callback, start=False)

        assert sub.poll_once() is False
        callback.assert_not_called()


class TestSharedChangeFeed:

    def test_counter_tallies_deliveries(self, mock_supabase):
        counter, sub = watch_table(mock_supabase, "alerts")
        deliver = mock_supabase.channel.return_value.on_postgres_changes.call_args.kwargs["callback"]

        deliver({"eventType": "INSERT"})
        deliver({"eventType": "UPDATE"})

        assert isinstance(counter, ChangeCounter)
        assert counter.count == 2
        sub.unsubscribe()

    def test_one_subscription_for_many_sessions(self):
        # FakeSupabaseClient forces the polling path, which starts a thread
        client = FakeSupabaseClient()

        @st.cache_resource
        def alerts_feed():
            return watch_table(client, "alerts", poll_interval=3600)

        counter, sub = alerts_feed()
        try:
            feeds = [alerts_feed() for _ in range(4)]

            assert all(f[0] is counter and f[1] is sub for f in feeds)
            assert isinstance(sub, PollingSubscription)
            watchers = [t for t in threading.enumerate() if t.name == "TableWatcher-alerts"]
            assert watchers == [sub._thread]
        finally:
            sub.unsubscribe()
            alerts_feed.clear()
