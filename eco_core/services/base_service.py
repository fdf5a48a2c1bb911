# =============================================================================
# eco_core/services/base_service.py
# Base Service Class with Common Functionality
# =============================================================================

from __future__ import annotations
from abc import ABC
from enum import Enum
from typing import Optional, Dict, Any
from dataclasses import dataclass

from eco_core.logging import get_logger, LogContext
from eco_core.errors import EcoNexusError


class Provenance(Enum):
    """Where the data in a ServiceResult came from."""
    REAL = "real"                   # Returned by the backend
    SYNTHESIZED = "synthesized"     # Fabricated locally after a failed fetch
    FAILED = "failed"               # Nothing usable


@dataclass
class ServiceResult:
    """
    Standard result container for service operations.

    Data-access helpers only ever return REAL or SYNTHESIZED results, both
    with ``error=None``, so views can always render ``data``. Provenance is
    the only way to tell fabricated data apart.
    """
    success: bool
    data: Optional[Any] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    provenance: Provenance = Provenance.REAL

    def __bool__(self) -> bool:
        return self.success

    @property
    def is_real(self) -> bool:
        return self.provenance is Provenance.REAL

    @property
    def is_synthesized(self) -> bool:
        return self.provenance is Provenance.SYNTHESIZED

    @classmethod
    def ok(cls, data: Any = None, metadata: Dict[str, Any] = None) -> ServiceResult:
        """Create a successful result backed by real data"""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def synthesized(
        cls,
        data: Any,
        cause: Optional[Exception] = None,
        metadata: Dict[str, Any] = None,
    ) -> ServiceResult:
        """Create a successful result carrying locally fabricated data"""
        metadata = dict(metadata or {})
        if cause is not None:
            metadata["fallback_reason"] = str(cause)
            if isinstance(cause, EcoNexusError):
                metadata["fallback_code"] = cause.code
        return cls(
            success=True,
            data=data,
            metadata=metadata,
            provenance=Provenance.SYNTHESIZED,
        )

    @classmethod
    def fail(
        cls,
        error: str,
        error_code: str = "UNKNOWN",
        metadata: Dict[str, Any] = None
    ) -> ServiceResult:
        """Create a failed result"""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            metadata=metadata,
            provenance=Provenance.FAILED,
        )

    @classmethod
    def from_exception(cls, e: Exception) -> ServiceResult:
        """Create a failed result from an exception"""
        if isinstance(e, EcoNexusError):
            return cls.fail(e.message, error_code=e.code, metadata=e.details)
        return cls.fail(str(e), error_code="EXCEPTION")


class BaseService(ABC):
    """
    Abstract base class for all services.

    Provides common functionality:
    - Logging
    - Operation timing
    - Result standardization

    Usage:
        class AlertService(BaseService):
            def fetch_alerts(self, limit: int = 5) -> ServiceResult:
                with self.log_operation("Fetching alerts"):
                    ...
    """

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)

    def log_operation(self, operation: str) -> LogContext:
        """Create a logging context for an operation."""
        return LogContext(self.logger, operation)

    def log_fallback(self, operation: str, cause: Exception) -> None:
        """Record that an operation is returning synthesized data."""
        self.logger.warning(f"{operation}: backend unavailable, using synthesized data ({cause})")
