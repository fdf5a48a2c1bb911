# =============================================================================
# eco_core/services/__init__.py
# Service Layer for EcoNexus
# =============================================================================
"""
Service layer shared by every data-access helper.

Usage Example:
-------------
    from eco_core.data.energy_service import fetch_energy_readings

    result = fetch_energy_readings("week", 7)
    for row in result.data:
        ...
    if result.is_synthesized:
        print(result.metadata["fallback_reason"])
"""

from .base_service import BaseService, ServiceResult, Provenance

__all__ = [
    "BaseService",
    "ServiceResult",
    "Provenance",
]
