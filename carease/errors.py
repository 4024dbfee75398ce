class CareEaseError(Exception):
    """Base class for errors that are safe to show to the caller."""
    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message or self.__class__.__name__)
        self.message = message or self.__class__.__name__


class AuthError(CareEaseError):
    """Bad login or duplicate signup email."""
    status_code = 401


class DuplicateRecordError(CareEaseError):
    status_code = 409


class NotFoundError(CareEaseError):
    status_code = 404


class PermissionDeniedError(CareEaseError):
    status_code = 403


class InvalidTransitionError(CareEaseError):
    """Status change not allowed from the record's current status."""
    status_code = 409


class ConcurrentUpdateError(CareEaseError):
    """The record changed since the caller read it."""
    status_code = 409
