class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class StorageError(DomainError):
    """Raised when the persistence layer fails (connection, timeout, SQL error)."""


class DuplicateRecordError(DomainError):
    """Raised by a ledger when a valid record already exists for the same student, room and day."""
