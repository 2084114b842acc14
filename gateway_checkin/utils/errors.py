"""Exception classes for check-in errors.

Every error carries a machine code and a user-facing message. The API layer
renders them as `success: false` envelopes.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standard error codes for check-in operations."""

    # General
    INTERNAL_ERROR = "INTERNAL_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"

    # Check-in flow
    ALREADY_CHECKED_IN = "ALREADY_CHECKED_IN"
    CHECKIN_DISABLED = "CHECKIN_DISABLED"
    INVALID_CHECKIN_CODE = "INVALID_CHECKIN_CODE"

    # Validation / lookup
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"

    # Infrastructure
    STORAGE_FAILURE = "STORAGE_FAILURE"
    CREDIT_FAILURE = "CREDIT_FAILURE"


class CheckinError(Exception):
    """Base exception for check-in errors.

    Attributes:
        code: Error code for programmatic handling
        message: User-facing message
        details: Additional error details
    """

    def __init__(
        self,
        code: ErrorCode | str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        self.code = code.value if isinstance(code, ErrorCode) else code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class AlreadyCheckedInError(CheckinError):
    """Raised when the user already has a record for today."""

    def __init__(self, checkin_date: str | None = None):
        super().__init__(
            code=ErrorCode.ALREADY_CHECKED_IN,
            message="Already checked in today",
            details={"checkin_date": checkin_date} if checkin_date else {},
        )


class CheckinDisabledError(CheckinError):
    """Raised when the check-in feature is switched off."""

    def __init__(self):
        super().__init__(
            code=ErrorCode.CHECKIN_DISABLED,
            message="Check-in is disabled",
        )


class InvalidCheckinCodeError(CheckinError):
    """Raised when the code gate is on and the submitted code is wrong."""

    def __init__(self):
        super().__init__(
            code=ErrorCode.INVALID_CHECKIN_CODE,
            message="Invalid check-in code",
        )


class CheckinValidationError(CheckinError):
    """Raised for malformed requests or out-of-range config values."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            code=ErrorCode.VALIDATION_ERROR,
            message=message,
            details={"field": field} if field else {},
        )


class CheckinNotFoundError(CheckinError):
    """Raised when a required row is absent."""

    def __init__(self, what: str):
        super().__init__(
            code=ErrorCode.NOT_FOUND,
            message=f"{what} not found",
        )


class StorageFailureError(CheckinError):
    """Raised when the persistence layer fails."""

    def __init__(self, diagnostic: str):
        super().__init__(
            code=ErrorCode.STORAGE_FAILURE,
            message=f"Check-in failed: {diagnostic}",
        )


class CreditFailureError(CheckinError):
    """Raised when the balance credit fails after the ledger insert.

    The unit of work is rolled back before this is raised.
    """

    def __init__(self, user_id: int, amount: int, diagnostic: str):
        super().__init__(
            code=ErrorCode.CREDIT_FAILURE,
            message=f"Check-in failed: {diagnostic}",
            details={"user_id": user_id, "amount": amount},
        )
