# =============================================================================
# eco_core/data/alert_service.py
# Supabase Service for Alerts
# =============================================================================
"""
Alerts Service

Table: alerts

Schema:
    - id: UUID (auto-generated)
    - created_at: timestamptz
    - title: text
    - description: text
    - alert_type: text (deforestation | energy | disaster | air_quality)
    - severity: text (low | medium | high)
    - is_read: bool
    - lat, lng: float (optional)
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, Optional

from eco_core.services import BaseService, ServiceResult
from .fallback import synthesize_alerts
from .supabase_client import SupabaseService


ALERTS_TABLE = "alerts"


class AlertService(BaseService):
    """Alert feed and read-state updates."""

    def __init__(self, client=None):
        super().__init__()
        self.alerts = SupabaseService(ALERTS_TABLE, client=client)

    def fetch_alerts(self, limit: int = 5, alert_type: Optional[str] = None) -> ServiceResult:
        """
        Fetch the most recent alerts.

        Args:
            limit: Maximum number of alerts
            alert_type: Only alerts of this type (e.g. "deforestation")

        Returns:
            ServiceResult, REAL or SYNTHESIZED (``limit`` alerts, four hours apart)
        """
        limit = max(int(limit), 1)
        filters = {"alert_type": alert_type} if alert_type else None

        with self.log_operation("Fetching alerts"):
            response = self.alerts.select(
                filters=filters,
                order_by="created_at",
                ascending=False,
                limit=limit,
            )
            if response.ok:
                return ServiceResult.ok(response.data)

            self.log_fallback("fetch_alerts", response.error)
            return ServiceResult.synthesized(
                synthesize_alerts(limit, alert_type=alert_type),
                response.error,
            )

    def mark_alert_read(self, alert_id: str) -> ServiceResult:
        """
        Flip an alert's read flag remotely.

        Returns a FAILED result when the write is rejected; callers update
        their local copy either way.
        """
        response = self.alerts.update({"id": alert_id}, {"is_read": True})
        if response.ok:
            return ServiceResult.ok({"id": alert_id, "is_read": True})
        return ServiceResult.from_exception(response.error)


def mark_read_locally(alerts: Iterable[Dict[str, Any]], alert_id: str) -> list:
    """Copy of alerts with the given one marked read."""
    return [
        {**alert, "is_read": True} if alert.get("id") == alert_id else alert
        for alert in alerts
    ]


def unread_count(alerts: Iterable[Dict[str, Any]]) -> int:
    return sum(1 for alert in alerts if not alert.get("is_read"))


def fetch_alerts(limit: int = 5, alert_type: Optional[str] = None) -> ServiceResult:
    """Fetch alerts using the shared client."""
    return AlertService().fetch_alerts(limit, alert_type=alert_type)
