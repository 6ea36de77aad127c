"""
Domain Exceptions

Errors raised by domain operations. The API layer maps each class to an
HTTP status through `shared.api.exceptions.domain_exception_handler`.
"""


class DomainError(Exception):
    """A business rule rejected the operation."""

    status_code = 400
    default_code = 'domain_error'

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def __str__(self):
        return self.message


class PermissionViolation(DomainError):
    """The caller is not allowed to act on the resource."""

    status_code = 403
    default_code = 'permission_denied'


class NotFound(DomainError):
    """The resource does not exist or is hidden from the caller."""

    status_code = 404
    default_code = 'not_found'


class ConflictError(DomainError):
    """The operation conflicts with the current state of the data."""

    status_code = 409
    default_code = 'conflict'


class InvalidTransition(ConflictError):
    """A state machine refused the requested transition."""

    default_code = 'invalid_transition'
