"""Domain-level exceptions.

Services raise these errors to express business rule violations.
Route handlers catch them and map to appropriate HTTP status codes.
"""

from domain.model.user import LoginField


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class DuplicateError(DomainError):
    """Entity with the same unique key already exists."""


class PermissionDeniedError(DomainError):
    """Caller lacks permission for the requested action."""


class UnauthorizedError(DomainError):
    """Access token is missing, malformed, expired, or its user is gone."""


class ValidationError(DomainError):
    """Input violates a business validation rule."""


class LoginIsOccupied(DuplicateError):
    """A login handle is already held by a different user.

    Carries the colliding field, never the other user's identity.
    """

    def __init__(self, field: LoginField):
        self.field = LoginField(field)
        super().__init__(f"{self.field.value} is already occupied")


class AmbiguousLoginError(DomainError):
    """A login string matches more than one user across different fields."""

    def __init__(self, fields: list[LoginField]):
        self.fields = fields
        super().__init__("Login matches more than one account")
