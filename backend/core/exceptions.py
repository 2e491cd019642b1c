"""
Error taxonomy and result type for the reservation core.

Services raise the errors below internally and convert them into a
``ServiceResult`` at their public boundary, so callers never see a raised
exception. ``ServiceError.to_http_exception`` gives an HTTP layer the
status-code mapping for each kind.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Generic, Optional, TypeVar

from fastapi import HTTPException, status

T = TypeVar("T")


class ServiceError(Exception):
    """Base error with a stable code, an HTTP status and a readable reason"""

    error_code = "SERVICE_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request could not be processed"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def public_detail(self, production: bool = False) -> str:
        """Message that is safe to return to the caller"""
        return self.detail

    def to_dict(self, production: bool = False) -> dict:
        return {
            "success": False,
            "error_code": self.error_code,
            "msg": self.public_detail(production),
        }

    def to_http_exception(self, production: bool = False) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail=self.to_dict(production),
        )


class NotFoundError(ServiceError):
    """Resource not found error"""

    error_code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class PreconditionError(ServiceError):
    """Resource exists but is not in a usable state (e.g. unverified restaurant)"""

    error_code = "PRECONDITION_FAILED"
    default_detail = "Resource is not available"


class ValidationError(ServiceError):
    """Validation error"""

    error_code = "VALIDATION_ERROR"
    default_detail = "Validation failed"


class ConfigurationError(ValidationError):
    """Stored configuration (e.g. opening hours) is missing or malformed"""

    error_code = "CONFIGURATION_ERROR"
    default_detail = "The opening hours are not defined"


class CapacityError(ServiceError):
    """Reservation would exceed the restaurant's daily capacity"""

    error_code = "CAPACITY_EXCEEDED"

    def __init__(self, remaining: int, day: date, detail: Optional[str] = None):
        self.remaining = remaining
        self.date = day
        super().__init__(
            detail
            or f"Not enough reservation slots available. Only {remaining} slots left for {day.isoformat()}"
        )


class QuotaError(ServiceError):
    """User already holds the maximum number of reservations for the day"""

    error_code = "DAILY_QUOTA_EXCEEDED"

    def __init__(self, day: date, limit: int, detail: Optional[str] = None):
        self.date = day
        self.limit = limit
        super().__init__(
            detail or f"Already made {limit} reservations on {day.isoformat()}"
        )


class ConflictError(ServiceError):
    """Reservation is too close to another reservation of the same user"""

    error_code = "RESERVATION_CONFLICT"
    default_detail = "Please ensure there is at least 1 hour gap between reservations."


class AuthorizationError(ServiceError):
    """Permission denied error"""

    error_code = "PERMISSION_DENIED"
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Not authorized to perform this action"


class TooLateError(ServiceError):
    """Change requested inside the pre-reservation lock window"""

    error_code = "TOO_LATE"
    default_detail = "You cannot change the reservation within 1 hour of the scheduled time"


class InternalError(ServiceError):
    """Unexpected repository or infrastructure failure"""

    error_code = "INTERNAL_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail: Optional[str] = None, public_message: Optional[str] = None):
        super().__init__(detail)
        self.public_message = public_message or self.default_detail

    def public_detail(self, production: bool = False) -> str:
        # The underlying message is kept for diagnostics outside production
        return self.public_message if production else self.detail


@dataclass
class ServiceResult(Generic[T]):
    """Discriminated success/error result returned by core operations"""

    ok: bool
    value: Optional[T] = None
    error: Optional[ServiceError] = None
    status_code: int = status.HTTP_200_OK

    @classmethod
    def success(cls, value: Any = None, status_code: int = status.HTTP_200_OK) -> "ServiceResult":
        return cls(ok=True, value=value, status_code=status_code)

    @classmethod
    def failure(cls, error: ServiceError) -> "ServiceResult":
        return cls(ok=False, error=error, status_code=error.status_code)

    def unwrap(self) -> T:
        """Return the value or raise the carried error"""
        if not self.ok:
            raise self.error
        return self.value
