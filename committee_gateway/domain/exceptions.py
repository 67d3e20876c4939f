"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    status_code = 400


class NotFoundError(DomainException):
    """Requested record does not exist in the committee state"""

    status_code = 404


class DuplicateRecordError(DomainException):
    """A record with the same natural key already exists"""

    status_code = 409


class ValidationFailedError(DomainException):
    """Submitted form data is incomplete or malformed"""

    status_code = 422


class InvalidTransitionError(DomainException):
    """Status change not allowed from the current status"""

    status_code = 409


class AttendanceClosedError(InvalidTransitionError):
    """Attendance can only be registered while the assembly is in progress"""


class DuplicateAttendanceError(DomainException):
    """Member already registered for this assembly"""

    status_code = 409


class MemberNotFoundError(NotFoundError):
    """No member matches the given RUT"""


class DocumentLockedError(DomainException):
    """Signed documents can no longer be edited"""

    status_code = 409


class LastUserError(DomainException):
    """The last remaining user account cannot be removed"""

    status_code = 409


class AuthenticationError(DomainException):
    """Username or password did not match"""

    status_code = 401


class PermissionDeniedError(DomainException):
    """Role is not allowed to use this module"""

    status_code = 403


class StorageError(DomainException):
    """State document could not be read or written"""

    status_code = 500
