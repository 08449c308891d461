class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class NotFoundError(DomainError):
    """Raised when a referenced employee or record does not exist."""

    code = "not_found"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "forbidden"


class AttendanceError(DomainError):
    """Check-in / check-out rule violations."""

    code = "attendance_error"


class AlreadyCheckedIn(AttendanceError):
    code = "already_checked_in"

    def __init__(self, message: str = "Already checked in today"):
        super().__init__(message)


class AlreadyCheckedOut(AttendanceError):
    code = "already_checked_out"

    def __init__(self, message: str = "Already checked out today"):
        super().__init__(message)


class NoCheckInFound(AttendanceError):
    code = "no_check_in_found"

    def __init__(self, message: str = "No check-in record found for today"):
        super().__init__(message)


class MustCheckInFirst(AttendanceError):
    code = "must_check_in_first"

    def __init__(self, message: str = "Must check in before checking out"):
        super().__init__(message)


class InvalidPolicyWindow(ValidationError):
    code = "invalid_policy_window"


class MalformedTimestamp(ValidationError):
    code = "malformed_timestamp"
