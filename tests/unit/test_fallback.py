# =============================================================================
# tests/unit/test_fallback.py
# Unit Tests for fallback record synthesis
# =============================================================================

import random
from datetime import datetime, timedelta

import pytest

from eco_core.data.fallback import (
    ALERT_TYPES,
    DEFAULT_DISPLAY_NAME,
    DEFAULT_PREFERENCES,
    ENERGY_SOURCES,
    format_display_name,
    is_synthetic,
    normalize_period,
    resolve_display_name,
    strip_memory_only,
    synthesize_alerts,
    synthesize_energy_readings,
    synthesize_profile,
)
from tests.conftest import make_user


class TestSynthesizeEnergyReadings:
    """Synthesized readings for charts"""

    def test_one_row_per_source_per_timestamp(self, fixed_now):
        rows = synthesize_energy_readings("week", 7, now=fixed_now)

        assert len(rows) == 7 * len(ENERGY_SOURCES)
        first_group = rows[:len(ENERGY_SOURCES)]
        assert [r["reading_type"] for r in first_group] == list(ENERGY_SOURCES)
        assert len({r["timestamp"] for r in first_group}) == 1

    def test_values_in_range_with_two_decimals(self, fixed_now):
        rows = synthesize_energy_readings("month", 10, now=fixed_now, rng=random.Random(1))

        for row in rows:
            assert 20 <= row["reading_value"] <= 120
            assert row["reading_value"] == round(row["reading_value"], 2)
            assert row["unit"] == "kWh"
            assert row["_synthetic"] is True

    @pytest.mark.parametrize("period,step", [
        ("day", timedelta(hours=4)),
        ("week", timedelta(days=1)),
        ("month", timedelta(days=7)),
    ])
    def test_timestamp_spacing_follows_period(self, fixed_now, period, step):
        rows = synthesize_energy_readings(period, 3, now=fixed_now)
        stamps = sorted({datetime.fromisoformat(r["timestamp"]) for r in rows}, reverse=True)

        assert stamps[0] == fixed_now
        assert stamps[0] - stamps[1] == step
        assert stamps[1] - stamps[2] == step

    def test_ids_are_unique(self, fixed_now):
        rows = synthesize_energy_readings("week", 7, now=fixed_now)
        assert len({r["id"] for r in rows}) == len(rows)

    def test_zero_limit_gives_nothing(self, fixed_now):
        assert synthesize_energy_readings("week", 0, now=fixed_now) == []

    def test_unknown_period_treated_as_week(self):
        assert normalize_period("fortnight") == "week"
        assert normalize_period(None) == "week"
        assert normalize_period("DAY") == "day"


class TestSynthesizeAlerts:
    """Synthesized alerts"""

    def test_count_and_spacing(self, fixed_now):
        alerts = synthesize_alerts(5, now=fixed_now)

        assert len(alerts) == 5
        times = [datetime.fromisoformat(a["created_at"]) for a in alerts]
        assert times[0] == fixed_now
        for newer, older in zip(times, times[1:]):
            assert newer - older == timedelta(hours=4)

    def test_alerts_are_unread_and_well_formed(self, fixed_now):
        for alert in synthesize_alerts(8, now=fixed_now, rng=random.Random(3)):
            assert alert["is_read"] is False
            assert alert["alert_type"] in ALERT_TYPES
            assert alert["severity"] in ("low", "medium", "high")
            assert alert["title"]
            assert alert["_synthetic"] is True

    def test_forced_type(self, fixed_now):
        alerts = synthesize_alerts(4, now=fixed_now, alert_type="disaster")
        assert {a["alert_type"] for a in alerts} == {"disaster"}

    def test_ids_unique(self):
        alerts = synthesize_alerts(10)
        assert len({a["id"] for a in alerts}) == 10


class TestProfileSynthesis:
    """Display name resolution and synthesized profiles"""

    def test_name_prefers_metadata_full_name(self):
        user = make_user(full_name="Ada Lovelace")
        assert resolve_display_name(user) == "Ada Lovelace"

    def test_name_falls_back_to_email_local_part(self):
        assert resolve_display_name(make_user(email="green.fan@example.org")) == "green.fan"

    def test_name_placeholder_without_user(self):
        assert resolve_display_name(None) == DEFAULT_DISPLAY_NAME
        assert resolve_display_name({"email": None}) == DEFAULT_DISPLAY_NAME

    def test_format_display_name(self):
        assert format_display_name("jane.doe-smith") == "Jane Doe Smith"

    def test_synthesized_profile_carries_default_preferences(self, fixed_now):
        profile = synthesize_profile("user-1", make_user(), now=fixed_now)

        assert profile["id"] == "user-1"
        assert profile["full_name"] == "jane.doe"
        for key, value in DEFAULT_PREFERENCES.items():
            assert profile[key] == value
        assert is_synthetic(profile)

    def test_strip_memory_only(self):
        record = {"id": "1", "full_name": "A", "_dark_mode": True}
        assert strip_memory_only(record) == {"id": "1", "full_name": "A"}
        assert not is_synthetic(strip_memory_only(record))
