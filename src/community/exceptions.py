"""Service-level error taxonomy.

Every error carries the HTTP status the API layer answers with, so route
handlers can let them propagate to the exception handler in ``main``.
"""


class ServiceError(Exception):
    """Base class for errors surfaced to the end user."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(ServiceError):
    """Credentials did not match, or a signed-in user is required."""

    status_code = 401


class DuplicateEmailError(ServiceError):
    """Registration attempted with an email that already has an account."""

    status_code = 409

    def __init__(self, email: str):
        super().__init__(f"An account with email {email} already exists")
        self.email = email


class PermissionDeniedError(ServiceError, PermissionError):
    """Role or ownership check failed."""

    status_code = 403


class ValidationError(ServiceError):
    """One or more fields violate their constraints.

    ``errors`` maps field name to a human-readable message.
    """

    status_code = 422

    def __init__(self, errors: dict[str, str]):
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in errors.items()))
        self.errors = errors

    @classmethod
    def from_pydantic(cls, exc) -> "ValidationError":
        """Build from a ``pydantic.ValidationError``, keeping the first message per field."""
        errors: dict[str, str] = {}
        for err in exc.errors():
            field = ".".join(str(part) for part in err["loc"]) or "__root__"
            errors.setdefault(field, err["msg"])
        return cls(errors)


class NotFoundError(ServiceError):
    """Referenced entity does not exist."""

    status_code = 404


class InvalidStateError(ServiceError):
    """Requested transition is not allowed from the entity's current state."""

    status_code = 409


class StoreError(ServiceError):
    """A call to the hosted backend failed."""

    status_code = 503
