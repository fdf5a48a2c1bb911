# =============================================================================
# eco_core/data/environment_service.py
# Supabase Services for Disaster, Forest, Drone and Community Records
# =============================================================================
"""
Environment Records

Tables:
    disaster_zones: id, name, description, lat, lng, intensity,
                    disaster_type, radius_meters, active, timestamp
    forest_data:    id, region_name, health, co2_absorption, area_hectares
    drone_scans:    id, location_name, lat, lng, scan_type, notes, created_at
    posts:          id, user_id, content, created_at
    likes:          id, post_id, user_id

Reads fall back to an empty list; these screens have nothing sensible to
fabricate.
"""

from __future__ import annotations
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

from eco_core.errors import ValidationError
from eco_core.services import BaseService, ServiceResult
from .fallback import utc_now
from .supabase_client import SupabaseService


DISASTER_TABLE = "disaster_zones"
FOREST_TABLE = "forest_data"
DRONE_SCAN_TABLE = "drone_scans"
POSTS_TABLE = "posts"
LIKES_TABLE = "likes"

DRONE_SCAN_TYPES = ("deforestation", "wildlife", "pollution", "flood", "fire")
REQUIRED_SCAN_FIELDS = ("location_name", "lat", "lng", "scan_type")


def forest_energy_impact(rows: Iterable[Dict[str, Any]]) -> float:
    """Sum of health-weighted CO2 absorption across forest regions."""
    return sum(
        (float(row.get("health") or 0) / 100.0) * float(row.get("co2_absorption") or 0)
        for row in rows
    )


def validate_drone_scan(scan: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: a required field is missing or malformed
    """
    for name in REQUIRED_SCAN_FIELDS:
        value = scan.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"{name.replace('_', ' ').capitalize()} is required", field=name)

    if scan["scan_type"] not in DRONE_SCAN_TYPES:
        raise ValidationError(
            "Unknown scan type",
            field="scan_type",
            expected=", ".join(DRONE_SCAN_TYPES),
            actual=str(scan["scan_type"]),
        )

    for name, bound in (("lat", 90.0), ("lng", 180.0)):
        try:
            coordinate = float(scan[name])
        except (TypeError, ValueError):
            raise ValidationError(f"{name} must be numeric", field=name)
        if not -bound <= coordinate <= bound:
            raise ValidationError(f"{name} out of range", field=name, expected=f"±{bound}")


class EnvironmentService(BaseService):
    """Disaster zones, forest regions, drone scans and community posts."""

    def __init__(self, client=None):
        super().__init__()
        self.disaster_zones = SupabaseService(DISASTER_TABLE, client=client)
        self.forest = SupabaseService(FOREST_TABLE, client=client)
        self.drone_scans = SupabaseService(DRONE_SCAN_TABLE, client=client)
        self.posts = SupabaseService(POSTS_TABLE, client=client)
        self.likes = SupabaseService(LIKES_TABLE, client=client)

    def _rows_or_empty(self, operation: str, response) -> ServiceResult:
        if response.ok:
            return ServiceResult.ok(response.data)
        self.log_fallback(operation, response.error)
        return ServiceResult.synthesized([], response.error)

    # -------------------------------------------------------------------------
    # Disaster zones
    # -------------------------------------------------------------------------

    def fetch_disaster_zones(
        self,
        days: int = 7,
        active_only: bool = True,
        now: Optional[datetime] = None,
    ) -> ServiceResult:
        """Zones reported within the last ``days`` days."""
        since = (now or utc_now()) - timedelta(days=days)
        with self.log_operation("Fetching disaster zones"):
            response = self.disaster_zones.select(
                filters={"active": True} if active_only else None,
                gte={"timestamp": since.isoformat()},
            )
            return self._rows_or_empty("fetch_disaster_zones", response)

    # -------------------------------------------------------------------------
    # Forest regions
    # -------------------------------------------------------------------------

    def fetch_forest_data(self, region_filter: Optional[str] = None) -> ServiceResult:
        """Forest regions ordered by name, optionally filtered by substring."""
        ilike = {"region_name": f"%{region_filter}%"} if region_filter else None
        with self.log_operation("Fetching forest data"):
            response = self.forest.select(order_by="region_name", ascending=True, ilike=ilike)
            result = self._rows_or_empty("fetch_forest_data", response)
            result.metadata = {**(result.metadata or {}), "energy_impact": forest_energy_impact(result.data)}
            return result

    # -------------------------------------------------------------------------
    # Drone scans
    # -------------------------------------------------------------------------

    def fetch_drone_scans(self, limit: int = 20) -> ServiceResult:
        with self.log_operation("Fetching drone scans"):
            response = self.drone_scans.select(order_by="created_at", ascending=False, limit=limit)
            return self._rows_or_empty("fetch_drone_scans", response)

    def submit_drone_scan(self, scan: Dict[str, Any]) -> ServiceResult:
        """Validate and store a new drone scan."""
        try:
            validate_drone_scan(scan)
        except ValidationError as e:
            return ServiceResult.from_exception(e)

        record = {
            "location_name": scan["location_name"].strip(),
            "lat": float(scan["lat"]),
            "lng": float(scan["lng"]),
            "scan_type": scan["scan_type"],
            "notes": (scan.get("notes") or "").strip(),
            "created_at": utc_now().isoformat(),
        }
        response = self.drone_scans.insert(record)
        if response.ok:
            return ServiceResult.ok(response.data[0] if response.data else record)
        return ServiceResult.from_exception(response.error)

    # -------------------------------------------------------------------------
    # Community posts
    # -------------------------------------------------------------------------

    def fetch_posts(self, user_id: Optional[str] = None) -> ServiceResult:
        """
        Posts newest first, each with ``likes_count`` and a ``liked`` flag
        for user_id. Likes are tallied from the likes table; when it cannot
        be read every count is 0 and nothing is liked.
        """
        with self.log_operation("Fetching posts"):
            response = self.posts.select(order_by="created_at", ascending=False)
            if not response.ok:
                return self._rows_or_empty("fetch_posts", response)

            counts: Counter = Counter()
            liked_ids = set()
            likes = self.likes.select(columns="post_id,user_id")
            if likes.ok:
                for row in likes.data:
                    counts[row.get("post_id")] += 1
                    if user_id and row.get("user_id") == user_id:
                        liked_ids.add(row.get("post_id"))
            else:
                self.logger.warning(f"Likes unavailable: {likes.error}")

            posts: List[Dict[str, Any]] = [
                {**post, "likes_count": counts[post.get("id")], "liked": post.get("id") in liked_ids}
                for post in response.data
            ]
            return ServiceResult.ok(posts)

    def create_post(self, user_id: Optional[str], content: str) -> ServiceResult:
        """Publish a post for a signed-in user."""
        if not user_id:
            return ServiceResult.from_exception(ValidationError("Sign in to post", field="user_id"))
        content = (content or "").strip()
        if not content:
            return ServiceResult.from_exception(ValidationError("Post content is required", field="content"))

        response = self.posts.insert({"content": content, "user_id": user_id})
        if response.ok:
            return ServiceResult.ok(response.data[0] if response.data else {"content": content})
        return ServiceResult.from_exception(response.error)
