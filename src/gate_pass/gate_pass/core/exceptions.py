class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid or no session exists."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced user, pass or notification does not exist."""


class ConflictError(DomainError):
    """Raised when a write collides with an existing row (e.g. username)."""


class DuplicateRequestError(ConflictError):
    """Raised when a student already holds an active pass for the same slot."""


class InvalidStateError(DomainError):
    """Raised when a pass is no longer in a state that allows the action."""
