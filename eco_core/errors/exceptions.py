# =============================================================================
# eco_core/errors/exceptions.py
# Custom Exception Hierarchy for EcoNexus
# =============================================================================

from typing import Optional, Dict, Any


class EcoNexusError(Exception):
    """
    Base exception for all EcoNexus errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (e.g., "BACKEND_001")
        details: Additional context as a dictionary
        recoverable: Whether the error can be recovered from
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "ECO_000"
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        base = f"[{self.code}] {self.message}"
        if self.details:
            base += f" | Details: {self.details}"
        return base

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization"""
        return {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
        }


# =============================================================================
# BACKEND EXCEPTIONS
# =============================================================================

class BackendError(EcoNexusError):
    """Raised when a remote query, write or subscription fails"""

    def __init__(
        self,
        message: str,
        resource: Optional[str] = None,
        backend_code: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if resource:
            details["resource"] = resource
        if backend_code:
            details["backend_code"] = backend_code

        super().__init__(
            message=message,
            code=kwargs.pop("code", "BACKEND_001"),
            details=details,
            **kwargs,
        )


class ResourceNotFoundError(BackendError):
    """Raised when a remote table or row does not exist"""

    def __init__(self, message: str, resource: Optional[str] = None, **kwargs):
        super().__init__(
            message=message,
            resource=resource,
            code="BACKEND_404",
            **kwargs,
        )


class NetworkError(EcoNexusError):
    """Raised when the backend cannot be reached"""

    def __init__(self, message: str, cause: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if cause:
            details["cause"] = cause

        super().__init__(
            message=message,
            code="NET_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# AUTH EXCEPTIONS
# =============================================================================

class AuthError(EcoNexusError):
    """Raised when sign-in, sign-up or password reset is rejected"""

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs):
        details = kwargs.pop("details", {})
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            code="AUTH_001",
            details=details,
            **kwargs,
        )


# =============================================================================
# INPUT AND CONFIGURATION EXCEPTIONS
# =============================================================================

class ValidationError(EcoNexusError):
    """Raised when a form field or argument fails validation"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if field:
            details["field"] = field
        if expected:
            details["expected"] = expected
        if actual:
            details["actual"] = actual

        super().__init__(
            message=message,
            code="VALID_001",
            details=details,
            **kwargs,
        )


class ConfigurationError(EcoNexusError):
    """Raised when configuration is invalid or missing"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        **kwargs,
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key

        super().__init__(
            message=message,
            code="CONFIG_001",
            details=details,
            recoverable=False,
            **kwargs,
        )
