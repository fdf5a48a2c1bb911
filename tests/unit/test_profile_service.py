# =============================================================================
# tests/unit/test_profile_service.py
# Unit Tests for ProfileService
# =============================================================================

from eco_core.data.profile_service import PROFILES_TABLE, ProfileService, build_profile_payload
from tests.conftest import FakeSupabaseClient, make_user


class TestFetchProfile:

    def test_stored_profile_returned(self):
        stored = {"id": "user-1", "full_name": "Stored Name", "bio": "hi"}
        client = FakeSupabaseClient(rows={PROFILES_TABLE: [stored]})

        result = ProfileService(client).fetch_profile("user-1", make_user())

        assert result.is_real
        assert result.data == stored
        calls = client.last_query(PROFILES_TABLE).calls
        assert ("eq", ("id", "user-1"), {}) in calls
        assert ("limit", (1,), {}) in calls

    def test_no_row_synthesizes_from_auth_metadata(self):
        client = FakeSupabaseClient()

        result = ProfileService(client).fetch_profile("user-1", make_user(full_name="Meta Name"))

        assert result.is_synthesized
        assert result.error is None
        assert result.data["full_name"] == "Meta Name"
        assert result.data["_notifications_enabled"] is True

    def test_missing_table_uses_email_local_part(self, missing_table_error):
        client = FakeSupabaseClient(errors={PROFILES_TABLE: missing_table_error})

        result = ProfileService(client).fetch_profile("user-1", make_user(email="river@example.com"))

        assert result.is_synthesized
        assert result.data["full_name"] == "river"


class TestUpdateProfile:

    def test_payload_drops_memory_only_keys(self):
        payload = build_profile_payload("u", {"full_name": "A", "bio": "", "_dark_mode": True, "extra": 1})
        assert payload["id"] == "u"
        assert "_dark_mode" not in payload
        assert "extra" not in payload

    def test_merged_profile_persisted(self):
        client = FakeSupabaseClient()
        current = {"id": "user-1", "full_name": "Old", "bio": "", "_dark_mode": False}

        result = ProfileService(client).update_profile(
            "user-1", {"full_name": "New", "_dark_mode": True}, current=current
        )

        assert result.is_real
        assert result.metadata["persisted"] is True
        assert result.data["full_name"] == "New"
        assert result.data["_dark_mode"] is True
        table, op, payload = client.writes[0]
        assert (table, op) == (PROFILES_TABLE, "upsert")
        assert payload["full_name"] == "New"
        assert not any(k.startswith("_") for k in payload)

    def test_write_failure_keeps_merged_profile(self, network_error):
        client = FakeSupabaseClient(errors={PROFILES_TABLE: network_error})
        current = {"id": "user-1", "full_name": "Old", "bio": "", "_data_sharing": False}

        result = ProfileService(client).update_profile("user-1", {"bio": "Planting trees"}, current=current)

        assert result.success
        assert result.is_synthesized
        assert result.metadata["persisted"] is False
        assert result.data["bio"] == "Planting trees"
        assert result.data["full_name"] == "Old"

    def test_fetches_current_when_not_given(self):
        client = FakeSupabaseClient(rows={PROFILES_TABLE: [{"id": "user-1", "full_name": "Row"}]})

        result = ProfileService(client).update_profile("user-1", {"bio": "x"})

        assert result.data["full_name"] == "Row"
        assert result.data["bio"] == "x"
