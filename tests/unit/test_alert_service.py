# =============================================================================
# tests/unit/test_alert_service.py
# Unit Tests for AlertService
# =============================================================================

from eco_core.data.alert_service import ALERTS_TABLE, AlertService, mark_read_locally, unread_count
from tests.conftest import FakeSupabaseClient


class TestFetchAlerts:

    def test_newest_first_with_limit(self):
        client = FakeSupabaseClient(rows={ALERTS_TABLE: [{"id": "a1", "is_read": False}]})

        result = AlertService(client).fetch_alerts(limit=5)

        calls = client.last_query(ALERTS_TABLE).calls
        assert ("order", ("created_at",), {"desc": True}) in calls
        assert ("limit", (5,), {}) in calls
        assert result.is_real
        assert result.data == [{"id": "a1", "is_read": False}]

    def test_type_filter(self):
        client = FakeSupabaseClient()
        AlertService(client).fetch_alerts(limit=3, alert_type="energy")
        assert ("eq", ("alert_type", "energy"), {}) in client.last_query(ALERTS_TABLE).calls

    def test_missing_table_synthesizes_limit_alerts(self, missing_table_error):
        client = FakeSupabaseClient(errors={ALERTS_TABLE: missing_table_error})

        result = AlertService(client).fetch_alerts(limit=4, alert_type="disaster")

        assert result.success and result.error is None
        assert result.is_synthesized
        assert len(result.data) == 4
        assert {a["alert_type"] for a in result.data} == {"disaster"}


class TestMarkRead:

    def test_update_sent(self):
        client = FakeSupabaseClient()

        result = AlertService(client).mark_alert_read("a1")

        assert result.success
        assert client.writes == [(ALERTS_TABLE, "update", {"is_read": True})]
        assert ("eq", ("id", "a1"), {}) in client.last_query(ALERTS_TABLE).calls

    def test_failure_reported(self, network_error):
        client = FakeSupabaseClient(errors={ALERTS_TABLE: network_error})
        result = AlertService(client).mark_alert_read("a1")
        assert not result.success
        assert result.error_code == "NET_001"

    def test_local_helpers(self):
        alerts = [{"id": "a", "is_read": False}, {"id": "b", "is_read": False}]

        updated = mark_read_locally(alerts, "a")

        assert unread_count(alerts) == 2
        assert unread_count(updated) == 1
        assert alerts[0]["is_read"] is False
