# =============================================================================
# eco_core/data/fallback.py
# Synthetic substitute records for unavailable backend resources
# =============================================================================
"""
Fallback synthesis.

When a table is missing or the backend is unreachable the data-access
helpers substitute plausible records built here, so every screen can render.
Synthesized records carry underscore-prefixed keys (``_synthetic`` for rows,
the preference flags for profiles); those keys are memory-only and are never
sent to the backend.
"""

from __future__ import annotations
import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional


# =============================================================================
# ENERGY
# =============================================================================

ENERGY_SOURCES = ("solar", "wind", "hydro", "biomass", "geothermal")

ENERGY_SOURCE_LABELS = {
    "solar": "Solar",
    "wind": "Wind",
    "hydro": "Hydro",
    "biomass": "Biomass",
    "geothermal": "Geothermal",
}

READING_VALUE_RANGE = (20.0, 120.0)
READING_UNIT = "kWh"

# Look-back window per period
PERIOD_OFFSETS = {
    "day": timedelta(days=1),
    "week": timedelta(days=7),
    "month": timedelta(days=30),
}

# Spacing between synthesized timestamps per period
PERIOD_STEPS = {
    "day": timedelta(hours=4),
    "week": timedelta(days=1),
    "month": timedelta(days=7),
}

DEFAULT_PERIOD = "week"


# =============================================================================
# ALERTS
# =============================================================================

ALERT_TYPES = ("deforestation", "energy", "disaster", "air_quality")
ALERT_SEVERITIES = ("low", "medium", "high")
ALERT_SOURCES = ("satellite", "sensor_network", "community_report", "drone_scan")
ALERT_MESSAGES = {
    "deforestation": (
        "Tree Cover Loss Detected",
        "Satellite imagery shows canopy loss compared to last week's baseline.",
    ),
    "energy": (
        "Unusual Energy Consumption",
        "Consumption is well above the rolling average for this time of day.",
    ),
    "disaster": (
        "Severe Weather Warning",
        "Heavy rainfall and flood risk forecast for the monitored area.",
    ),
    "air_quality": (
        "Air Quality Advisory",
        "PM2.5 levels exceed recommended limits; limit outdoor activity.",
    ),
}
ALERT_SPACING = timedelta(hours=4)

# Center for synthesized alert coordinates (San Francisco)
DEFAULT_CENTER = (37.7749, -122.4194)


# =============================================================================
# PROFILE
# =============================================================================

MEMORY_ONLY_PREFIX = "_"

DEFAULT_PREFERENCES = {
    "_notifications_enabled": True,
    "_dark_mode": False,
    "_data_sharing": False,
}

DEFAULT_DISPLAY_NAME = "EcoNexus User"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_period(period) -> str:
    """Return a known period key; unknown values fall back to 'week'."""
    value = getattr(period, "value", period)
    value = str(value).lower() if value is not None else DEFAULT_PERIOD
    return value if value in PERIOD_OFFSETS else DEFAULT_PERIOD


def synthesize_energy_readings(
    period="week",
    limit: int = 7,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
) -> List[Dict[str, Any]]:
    """
    Build ``limit`` timestamps x every energy source worth of readings.

    Group i is stamped ``now - i * step`` where step depends on the period,
    so rows are ordered newest first and each source appears once per group.

    Args:
        period: "day", "week" or "month"
        limit: Number of timestamps
        now: Reference time (default: current UTC time)
        rng: Random generator (default: module random)

    Returns:
        List of reading dicts
    """
    period = normalize_period(period)
    step = PERIOD_STEPS[period]
    now = now or utc_now()
    rng = rng or random
    low, high = READING_VALUE_RANGE

    readings = []
    for i in range(max(int(limit), 0)):
        timestamp = (now - i * step).isoformat()
        for source in ENERGY_SOURCES:
            readings.append({
                "id": f"synthetic-{source}-{i}",
                "timestamp": timestamp,
                "reading_type": source,
                "reading_value": round(rng.uniform(low, high), 2),
                "unit": READING_UNIT,
                "_synthetic": True,
            })
    return readings


def synthesize_alerts(
    limit: int = 5,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
    alert_type: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Build ``limit`` alerts spaced four hours apart, newest first.

    Args:
        limit: Number of alerts
        now: Reference time (default: current UTC time)
        rng: Random generator (default: module random)
        alert_type: Force every alert to this type

    Returns:
        List of alert dicts
    """
    now = now or utc_now()
    rng = rng or random
    lat0, lng0 = DEFAULT_CENTER

    alerts = []
    for i in range(max(int(limit), 0)):
        kind = alert_type or rng.choice(ALERT_TYPES)
        title, message = ALERT_MESSAGES.get(kind, ALERT_MESSAGES["energy"])
        alerts.append({
            "id": str(uuid.uuid4()),
            "created_at": (now - i * ALERT_SPACING).isoformat(),
            "title": title,
            "description": message,
            "alert_type": kind,
            "severity": rng.choice(ALERT_SEVERITIES),
            "source": rng.choice(ALERT_SOURCES),
            "is_read": False,
            "lat": round(lat0 + rng.uniform(-0.2, 0.2), 5),
            "lng": round(lng0 + rng.uniform(-0.2, 0.2), 5),
            "_synthetic": True,
        })
    return alerts


def _user_field(user, name: str):
    if user is None:
        return None
    if isinstance(user, dict):
        return user.get(name)
    return getattr(user, name, None)


def email_local_part(email: Optional[str]) -> Optional[str]:
    if not email or "@" not in email:
        return email or None
    return email.split("@")[0] or None


def resolve_display_name(user) -> str:
    """
    Best available name for a user: metadata full_name or name, then the
    email local-part, then a generic placeholder.
    """
    metadata = _user_field(user, "user_metadata") or {}
    for key in ("full_name", "name"):
        value = metadata.get(key)
        if value:
            return value
    return email_local_part(_user_field(user, "email")) or DEFAULT_DISPLAY_NAME


def format_display_name(raw: str) -> str:
    """'jane.doe-smith' -> 'Jane Doe Smith' (greetings only)."""
    parts = [p for p in raw.replace("-", " ").replace("_", " ").replace(".", " ").split() if p]
    return " ".join(p[:1].upper() + p[1:].lower() for p in parts) or raw


def synthesize_profile(
    user_id: str,
    user=None,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """In-memory profile for a user with no stored record."""
    return {
        "id": user_id,
        "full_name": resolve_display_name(user),
        "bio": "",
        "updated_at": (now or utc_now()).isoformat(),
        **DEFAULT_PREFERENCES,
    }


def is_memory_only(key: str) -> bool:
    return key.startswith(MEMORY_ONLY_PREFIX)


def strip_memory_only(record: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of record without underscore-prefixed keys."""
    return {k: v for k, v in record.items() if not is_memory_only(k)}


def is_synthetic(record: Dict[str, Any]) -> bool:
    """True if the record carries any memory-only key."""
    return any(is_memory_only(k) for k in record)
