# =============================================================================
# tests/unit/test_energy_service.py
# Unit Tests for EnergyService
# =============================================================================

from datetime import timedelta

from eco_core.data.energy_service import ENERGY_TABLE, EnergyPeriod, EnergyService, period_start
from eco_core.data.fallback import ENERGY_SOURCES
from eco_core.services import Provenance
from tests.conftest import FakeSupabaseClient


class TestPeriodStart:

    def test_fixed_offsets(self, fixed_now):
        assert period_start("day", fixed_now) == fixed_now - timedelta(days=1)
        assert period_start(EnergyPeriod.WEEK, fixed_now) == fixed_now - timedelta(days=7)
        assert period_start("month", fixed_now) == fixed_now - timedelta(days=30)


class TestFetchEnergyReadings:
    """Query shape and fallback behaviour"""

    def test_returns_backend_rows(self, fixed_now):
        rows = [{"id": "r1", "timestamp": fixed_now.isoformat(), "reading_type": "solar",
                 "reading_value": 42.0, "unit": "kWh"}]
        client = FakeSupabaseClient(rows={ENERGY_TABLE: rows})

        result = EnergyService(client).fetch_energy_readings("week", 7, now=fixed_now)

        assert result.success
        assert result.provenance is Provenance.REAL
        assert result.data == rows
        assert result.metadata["period"] == "week"

    def test_query_bounds_order_and_limit(self, fixed_now):
        client = FakeSupabaseClient()
        EnergyService(client).fetch_energy_readings("day", 12, now=fixed_now)

        calls = client.last_query(ENERGY_TABLE).calls
        assert ("gte", ("timestamp", (fixed_now - timedelta(days=1)).isoformat()), {}) in calls
        assert ("lte", ("timestamp", fixed_now.isoformat()), {}) in calls
        assert ("order", ("timestamp",), {"desc": True}) in calls
        assert ("limit", (12,), {}) in calls

    def test_empty_table_is_real_empty_result(self, fixed_now):
        result = EnergyService(FakeSupabaseClient()).fetch_energy_readings(now=fixed_now)

        assert result.is_real
        assert result.data == []

    def test_missing_table_falls_back(self, fixed_now, missing_table_error):
        client = FakeSupabaseClient(errors={ENERGY_TABLE: missing_table_error})

        result = EnergyService(client).fetch_energy_readings("week", 7, now=fixed_now)

        assert result.success
        assert result.error is None
        assert result.is_synthesized
        assert len(result.data) == 7 * len(ENERGY_SOURCES)
        assert result.metadata["fallback_code"] == "BACKEND_404"

    def test_network_failure_falls_back(self, fixed_now, network_error):
        client = FakeSupabaseClient(errors={ENERGY_TABLE: network_error})

        result = EnergyService(client).fetch_energy_readings("month", 3, now=fixed_now)

        assert result.is_synthesized
        assert len(result.data) == 3 * len(ENERGY_SOURCES)
        assert result.metadata["fallback_code"] == "NET_001"

    def test_limit_clamped_to_one(self, fixed_now, network_error):
        client = FakeSupabaseClient(errors={ENERGY_TABLE: network_error})
        result = EnergyService(client).fetch_energy_readings("week", 0, now=fixed_now)
        assert len(result.data) == len(ENERGY_SOURCES)


class TestRecentReadingsAndInsert:

    def test_recent_fallback_is_oldest_first(self, missing_table_error):
        client = FakeSupabaseClient(errors={ENERGY_TABLE: missing_table_error})

        result = EnergyService(client).fetch_recent_readings()

        stamps = [r["timestamp"] for r in result.data]
        assert result.is_synthesized
        assert stamps == sorted(stamps)

    def test_recent_queries_earliest_first(self):
        client = FakeSupabaseClient()

        EnergyService(client).fetch_recent_readings(limit=50)

        calls = client.last_query(ENERGY_TABLE).calls
        assert ("order", ("timestamp",), {"desc": False}) in calls
        assert ("limit", (50,), {}) in calls

    def test_insert_valid_reading(self):
        client = FakeSupabaseClient()

        result = EnergyService(client).insert_reading("wind", "55.5")

        assert result.success
        table, op, payload = client.writes[0]
        assert (table, op) == (ENERGY_TABLE, "insert")
        assert payload["reading_value"] == 55.5
        assert payload["unit"] == "kWh"

    def test_insert_rejects_unknown_source(self):
        client = FakeSupabaseClient()

        result = EnergyService(client).insert_reading("coal", 10)

        assert not result.success
        assert result.error_code == "VALID_001"
        assert client.writes == []

    def test_insert_failure_is_reported(self, network_error):
        client = FakeSupabaseClient(errors={ENERGY_TABLE: network_error})
        result = EnergyService(client).insert_reading("solar", 10)
        assert result.provenance is Provenance.FAILED
