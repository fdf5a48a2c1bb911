# =============================================================================
# eco_core/data/energy_service.py
# Supabase Service for Energy Readings
# =============================================================================
"""
Energy Readings Service

Table: energy_readings

Schema:
    - id: UUID (auto-generated)
    - timestamp: timestamptz
    - reading_type: text (solar | wind | hydro | biomass | geothermal)
    - reading_value: float
    - unit: text (kWh)
"""

from __future__ import annotations
from datetime import datetime
from enum import Enum
from typing import Optional

from eco_core.errors import ValidationError
from eco_core.services import BaseService, ServiceResult
from .fallback import (
    ENERGY_SOURCES,
    PERIOD_OFFSETS,
    READING_UNIT,
    normalize_period,
    synthesize_energy_readings,
    utc_now,
)
from .supabase_client import SupabaseService


ENERGY_TABLE = "energy_readings"


class EnergyPeriod(Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def period_start(period, now: Optional[datetime] = None) -> datetime:
    """Start of the look-back window: now minus the period's fixed offset."""
    now = now or utc_now()
    return now - PERIOD_OFFSETS[normalize_period(period)]


class EnergyService(BaseService):
    """Energy readings for charts and the energy-flow view."""

    def __init__(self, client=None):
        super().__init__()
        self.readings = SupabaseService(ENERGY_TABLE, client=client)

    def fetch_energy_readings(
        self,
        period="week",
        limit: int = 7,
        now: Optional[datetime] = None,
    ) -> ServiceResult:
        """
        Fetch readings within the period, newest first.

        On any backend failure returns ``limit`` synthesized timestamps for
        each energy source, spaced according to the period.

        Args:
            period: "day", "week", "month" or an EnergyPeriod
            limit: Row limit for the query / timestamp count for the fallback
            now: Reference time (default: current UTC time)

        Returns:
            ServiceResult, REAL or SYNTHESIZED
        """
        period = normalize_period(period)
        limit = max(int(limit), 1)
        now = now or utc_now()
        start = period_start(period, now)

        with self.log_operation(f"Fetching energy readings ({period})"):
            response = self.readings.select(
                gte={"timestamp": start.isoformat()},
                lte={"timestamp": now.isoformat()},
                order_by="timestamp",
                ascending=False,
                limit=limit,
            )
            if response.ok:
                return ServiceResult.ok(response.data, metadata={"period": period})

            self.log_fallback("fetch_energy_readings", response.error)
            return ServiceResult.synthesized(
                synthesize_energy_readings(period, limit, now=now),
                response.error,
                metadata={"period": period},
            )

    def fetch_recent_readings(self, limit: int = 100) -> ServiceResult:
        """Earliest readings in ascending time order (energy-flow view)."""
        with self.log_operation("Fetching recent energy readings"):
            response = self.readings.select(order_by="timestamp", ascending=True, limit=limit)
            if response.ok:
                return ServiceResult.ok(response.data)

            self.log_fallback("fetch_recent_readings", response.error)
            # One group per day for the last week, oldest first
            rows = synthesize_energy_readings("week", 7)
            return ServiceResult.synthesized(list(reversed(rows)), response.error)

    def insert_reading(
        self,
        reading_type: str,
        reading_value: float,
        unit: str = READING_UNIT,
    ) -> ServiceResult:
        """Record a new reading."""
        if reading_type not in ENERGY_SOURCES:
            return ServiceResult.from_exception(ValidationError(
                "Unknown energy source",
                field="reading_type",
                expected=", ".join(ENERGY_SOURCES),
                actual=str(reading_type),
            ))
        try:
            value = float(reading_value)
        except (TypeError, ValueError):
            return ServiceResult.from_exception(
                ValidationError("Reading value must be numeric", field="reading_value")
            )

        record = {
            "timestamp": utc_now().isoformat(),
            "reading_type": reading_type,
            "reading_value": value,
            "unit": unit,
        }
        response = self.readings.insert(record)
        if response.ok:
            return ServiceResult.ok(response.data[0] if response.data else record)
        return ServiceResult.from_exception(response.error)


def fetch_energy_readings(period="week", limit: int = 7) -> ServiceResult:
    """Fetch energy readings using the shared client."""
    return EnergyService().fetch_energy_readings(period, limit)
