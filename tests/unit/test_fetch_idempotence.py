# =============================================================================
# tests/unit/test_fetch_idempotence.py
# Repeated fetches: same shape every time, same rows when the backend is up
# =============================================================================

import pytest

from eco_core.data.alert_service import ALERTS_TABLE, AlertService
from eco_core.data.energy_service import ENERGY_TABLE, EnergyService
from eco_core.data.profile_service import PROFILES_TABLE, ProfileService
from tests.conftest import FakeSupabaseClient, make_user


def _shape(rows):
    if isinstance(rows, dict):
        return sorted(rows)
    return [sorted(row) for row in rows]


def _fetchers(client, now):
    return {
        "profile": lambda: ProfileService(client).fetch_profile("u-1", make_user("u-1")),
        "energy": lambda: EnergyService(client).fetch_energy_readings("week", 7, now=now),
        "alerts": lambda: AlertService(client).fetch_alerts(5),
    }


@pytest.fixture
def live_client(fixed_now):
    stamp = fixed_now.isoformat()
    return FakeSupabaseClient(rows={
        PROFILES_TABLE: [{"id": "u-1", "full_name": "Grove Keeper", "bio": ""}],
        ENERGY_TABLE: [
            {"id": "r1", "timestamp": stamp, "reading_type": "solar", "reading_value": 4.0, "unit": "kWh"},
            {"id": "r2", "timestamp": stamp, "reading_type": "wind", "reading_value": 2.5, "unit": "kWh"},
        ],
        ALERTS_TABLE: [
            {"id": "a1", "title": "Flood", "alert_type": "flood", "severity": "high",
             "is_read": False, "created_at": stamp},
        ],
    })


@pytest.fixture
def empty_backend(missing_table_error):
    return FakeSupabaseClient(errors={
        table: missing_table_error for table in (PROFILES_TABLE, ENERGY_TABLE, ALERTS_TABLE)
    })


@pytest.mark.parametrize("name", ["profile", "energy", "alerts"])
class TestRepeatedFetch:

    def test_live_backend_returns_same_rows(self, name, live_client, fixed_now):
        fetch = _fetchers(live_client, fixed_now)[name]

        first, second = fetch(), fetch()

        assert first.is_real and second.is_real
        assert first.data is not None
        assert first.data == second.data

    def test_fallback_keeps_shape(self, name, empty_backend, fixed_now):
        fetch = _fetchers(empty_backend, fixed_now)[name]

        first, second = fetch(), fetch()

        assert first.is_synthesized and second.is_synthesized
        assert first.data is not None and second.data is not None
        assert first.error is None and second.error is None
        assert _shape(first.data) == _shape(second.data)
        if isinstance(first.data, list):
            assert len(first.data) == len(second.data) > 0
