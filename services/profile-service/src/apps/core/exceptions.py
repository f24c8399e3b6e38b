# services/profile-service/src/apps/core/exceptions.py
"""
Profile Service Exceptions

Custom exceptions for profile, work history, search and payroll operations.
"""

from typing import Optional, Dict, Any


class ProfileServiceError(Exception):
    """Base exception for profile service errors."""

    def __init__(
        self,
        message: str,
        code: str = "PROFILE_SERVICE_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "success": False,
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# NOT FOUND (404)
# =============================================================================

class NotFoundError(ProfileServiceError):
    """Raised when a requested entity does not exist."""

    def __init__(
        self,
        entity: str,
        entity_id: Any = None,
        message: str = None,
        code: str = "NOT_FOUND",
        details: Optional[Dict[str, Any]] = None
    ):
        msg = message or f"{entity} not found"
        error_details = details or {}
        if entity_id is not None:
            error_details.setdefault("id", str(entity_id))
        super().__init__(message=msg, code=code, details=error_details)


class ProfileNotFoundError(NotFoundError):
    """Raised when a profile is not found."""

    def __init__(self, user_id: Any = None, message: str = None):
        super().__init__(
            entity="Profile",
            entity_id=user_id,
            message=message,
            code="PROFILE_NOT_FOUND",
        )


class WorkHistoryNotFoundError(NotFoundError):
    """Raised when a work history record is not found."""

    def __init__(self, work_history_id: Any = None, message: str = None):
        super().__init__(
            entity="Work history",
            entity_id=work_history_id,
            message=message,
            code="WORK_HISTORY_NOT_FOUND",
        )


class CertificationNotFoundError(NotFoundError):
    """Raised when a certification is not found."""

    def __init__(self, certification_id: Any = None, message: str = None):
        super().__init__(
            entity="Certification",
            entity_id=certification_id,
            message=message,
            code="CERTIFICATION_NOT_FOUND",
        )


class PayrollRecordNotFoundError(NotFoundError):
    """Raised when a payroll record is not found."""

    def __init__(self, payroll_id: Any = None, message: str = None):
        super().__init__(
            entity="Payroll record",
            entity_id=payroll_id,
            message=message,
            code="PAYROLL_NOT_FOUND",
        )


# =============================================================================
# VALIDATION (400)
# =============================================================================

class ValidationError(ProfileServiceError):
    """Raised when request data fails validation."""

    def __init__(
        self,
        message: str,
        field: str = None,
        code: str = "VALIDATION_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if field:
            error_details["field"] = field
        super().__init__(message=message, code=code, details=error_details)


class InvalidRangeError(ValidationError):
    """Raised when a date range is empty or inverted."""

    def __init__(self, start: Any, end: Any, message: str = None):
        super().__init__(
            message=message or "Start date must be before end date",
            code="INVALID_DATE_RANGE",
            details={"start_date": str(start), "end_date": str(end)},
        )


class UnsupportedCurrencyError(ValidationError):
    """Raised when a currency is not in the configured set."""

    def __init__(self, currency: Any, supported=None):
        super().__init__(
            message=f"Unsupported currency: {currency}",
            field="currency",
            code="UNSUPPORTED_CURRENCY",
            details={"supported": list(supported or [])},
        )


class UploadValidationError(ValidationError):
    """Raised when an uploaded file is rejected."""

    def __init__(self, message: str, filename: str = None):
        super().__init__(
            message=message,
            code="UPLOAD_REJECTED",
            details={"filename": filename} if filename else None,
        )


# =============================================================================
# PAYROLL STATE / PAYMENT
# =============================================================================

class PayrollStateError(ProfileServiceError):
    """Raised when a payroll record cannot move to the requested state."""

    def __init__(
        self,
        current_state: str,
        target_state: str,
        message: str = None
    ):
        msg = message or f"Cannot transition payroll from {current_state} to {target_state}"
        super().__init__(
            message=msg,
            code="PAYROLL_STATE_ERROR",
            details={
                "current_state": current_state,
                "target_state": target_state,
            }
        )


class PaymentFailedError(ProfileServiceError):
    """Raised when the payment gateway rejects a transfer."""

    def __init__(self, message: str = "Payment processing failed", details=None):
        super().__init__(
            message=message,
            code="PAYMENT_FAILED",
            details=details,
        )


# =============================================================================
# RECORD STORE (500)
# =============================================================================

class UpstreamError(ProfileServiceError):
    """Raised when the record store fails."""

    def __init__(self, operation: str, message: str = None):
        super().__init__(
            message=message or "Record store unavailable",
            code="UPSTREAM_ERROR",
            details={"operation": operation},
        )
