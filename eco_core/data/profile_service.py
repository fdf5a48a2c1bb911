# =============================================================================
# eco_core/data/profile_service.py
# Supabase Service for User Profiles
# =============================================================================
"""
Profile Service

Table: profiles

Schema:
    - id: UUID (auth user id)
    - full_name: text
    - bio: text
    - updated_at: timestamptz

Preference flags (_notifications_enabled, _dark_mode, _data_sharing) have no
column; they live only in memory and are stripped before every write.
"""

from __future__ import annotations
from typing import Any, Dict, Optional

from eco_core.errors import ResourceNotFoundError
from eco_core.services import BaseService, ServiceResult
from .fallback import strip_memory_only, synthesize_profile, utc_now
from .supabase_client import SupabaseService


PROFILES_TABLE = "profiles"

# Columns known to exist remotely
PERSISTABLE_PROFILE_FIELDS = ("full_name", "bio", "updated_at")


def build_profile_payload(user_id: str, profile: Dict[str, Any]) -> Dict[str, Any]:
    """Subset of a profile that is safe to write to the profiles table."""
    payload = {"id": user_id}
    payload.update({k: profile[k] for k in PERSISTABLE_PROFILE_FIELDS if k in profile})
    return strip_memory_only(payload)


class ProfileService(BaseService):
    """Read and write the signed-in user's profile."""

    def __init__(self, client=None):
        super().__init__()
        self.profiles = SupabaseService(PROFILES_TABLE, client=client)

    def fetch_profile(self, user_id: str, user=None) -> ServiceResult:
        """
        Fetch a profile by user id.

        Falls back to an in-memory profile (name from auth metadata, email
        local-part or a placeholder) when no row exists or the query fails.

        Args:
            user_id: Auth user id
            user: Auth user object or dict, used for the fallback name

        Returns:
            ServiceResult, REAL or SYNTHESIZED, error always None
        """
        with self.log_operation("Fetching profile"):
            response = self.profiles.select(filters={"id": user_id}, limit=1)
            if response.ok and response.data:
                return ServiceResult.ok(response.data[0])

            cause = response.error or ResourceNotFoundError(
                f"No stored profile for {user_id}", resource=PROFILES_TABLE
            )
            self.log_fallback("fetch_profile", cause)
            return ServiceResult.synthesized(synthesize_profile(user_id, user), cause)

    def update_profile(
        self,
        user_id: str,
        updates: Optional[Dict[str, Any]],
        current: Optional[Dict[str, Any]] = None,
        user=None,
    ) -> ServiceResult:
        """
        Merge updates into the current profile and persist the safe subset.

        Args:
            user_id: Auth user id
            updates: Changed fields, memory-only keys allowed
            current: Profile already on screen (fetched when omitted)
            user: Auth user, used if a profile has to be synthesized

        Returns:
            ServiceResult whose data is the full merged profile;
            metadata["persisted"] says whether the remote write succeeded
        """
        with self.log_operation("Updating profile"):
            if current is None:
                current = self.fetch_profile(user_id, user).data

            merged = {**current, **(updates or {})}
            merged["id"] = user_id
            merged["updated_at"] = utc_now().isoformat()

            payload = build_profile_payload(user_id, merged)
            response = self.profiles.upsert(payload)

            if response.ok:
                return ServiceResult.ok(merged, metadata={"persisted": True, "payload": payload})

            self.log_fallback("update_profile", response.error)
            return ServiceResult.synthesized(
                merged,
                response.error,
                metadata={"persisted": False, "payload": payload},
            )


def fetch_profile(user_id: str, user=None) -> ServiceResult:
    """Fetch a profile using the shared client."""
    return ProfileService().fetch_profile(user_id, user)


def update_profile(
    user_id: str,
    updates: Optional[Dict[str, Any]],
    current: Optional[Dict[str, Any]] = None,
    user=None,
) -> ServiceResult:
    """Update a profile using the shared client."""
    return ProfileService().update_profile(user_id, updates, current=current, user=user)
