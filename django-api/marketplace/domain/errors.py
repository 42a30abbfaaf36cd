"""Domain error codes for the marketplace module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_ID = "INVALID_ID"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    BAND_NOT_FOUND = "BAND_NOT_FOUND"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    REQUEST_NOT_FOUND = "REQUEST_NOT_FOUND"
    APPLICATION_NOT_FOUND = "APPLICATION_NOT_FOUND"
    NOT_A_MEMBER = "NOT_A_MEMBER"
    ALREADY_APPLIED = "ALREADY_APPLIED"
    ALREADY_REVIEWED = "ALREADY_REVIEWED"
    REVIEW_NOT_ALLOWED = "REVIEW_NOT_ALLOWED"
    REQUEST_ALREADY_RESOLVED = "REQUEST_ALREADY_RESOLVED"
    REQUEST_ALREADY_PENDING = "REQUEST_ALREADY_PENDING"
    PROFILE_EXISTS = "PROFILE_EXISTS"
    BACKEND_ERROR = "BACKEND_ERROR"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidIdError(DomainError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, kind: str = "ID") -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {kind} format",
        )


class ValidationFailedError(DomainError):
    """Raised when input breaks a local invariant. No backend call is made."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.VALIDATION_FAILED, message=message)


class NotAuthorizedError(DomainError):
    """Raised when the acting user lacks the role an operation requires."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.NOT_AUTHORIZED, message=message)


class EventNotFoundError(DomainError):
    """Raised when an event does not exist."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.EVENT_NOT_FOUND, message="Event not found")


class BandNotFoundError(DomainError):
    """Raised when a band does not exist or has been disbanded."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.BAND_NOT_FOUND, message="Band not found")


class ProfileNotFoundError(DomainError):
    """Raised when a profile does not exist or the user has not set one up."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.PROFILE_NOT_FOUND, message="Profile not found")


class BandRequestNotFoundError(DomainError):
    """Raised when a join request or invitation does not exist."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.REQUEST_NOT_FOUND, message="Request not found")


class ApplicationNotFoundError(DomainError):
    """Raised when an application (booking) does not exist."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.APPLICATION_NOT_FOUND,
            message="Application not found",
        )


class NotABandMemberError(DomainError):
    """Raised when a target user holds no membership in the band."""

    def __init__(self, message: str = "Selected user is not a member of this band") -> None:
        super().__init__(code=ErrorCode.NOT_A_MEMBER, message=message)


class AlreadyAppliedError(DomainError):
    """Raised when a musician applies to the same event twice."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_APPLIED,
            message="You have already applied for this event",
        )


class AlreadyReviewedError(DomainError):
    """Raised when a reviewer already reviewed this booking."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_REVIEWED,
            message="You have already reviewed this person for this event",
        )


class ReviewNotAllowedError(DomainError):
    """Raised when no finished booking links reviewer and reviewee."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.REVIEW_NOT_ALLOWED,
            message="You can only review someone you have worked with on a completed event",
        )


class RequestAlreadyResolvedError(DomainError):
    """Raised when a request is no longer pending."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.REQUEST_ALREADY_RESOLVED,
            message="Request has already been resolved",
        )


class RequestAlreadyPendingError(DomainError):
    """Raised when a band and musician already have an open request."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.REQUEST_ALREADY_PENDING,
            message="A request between this band and musician is already pending",
        )


class ProfileExistsError(DomainError):
    """Raised when a user who already has a profile tries to create another."""

    def __init__(self) -> None:
        super().__init__(code=ErrorCode.PROFILE_EXISTS, message="Profile already exists")


class BackendError(DomainError):
    """Raised by stores when a backend query or mutation fails.

    The message is safe to show; the underlying exception is chained.
    """

    def __init__(self, message: str = "Backend request failed") -> None:
        super().__init__(code=ErrorCode.BACKEND_ERROR, message=message)
