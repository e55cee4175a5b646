"""Domain exceptions."""

from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, message is stored as an attribute so handlers can read it without str().
    # Don't raise this directly - pick a subclass so callers can catch precisely.
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class EntityNotFoundException(DomainException):
    """Raised when an entity is not found.

    HTTP Status: 404
    """

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(f"{entity_type} with id {entity_id} not found")
        self.entity_type = entity_type
        self.entity_id = entity_id


class BusinessRuleViolation(DomainException):
    """A business rule was violated.

    HTTP Status: 400

    Example:
        raise BusinessRuleViolation("Cannot merge a release with itself")
    """

    pass


class AuthenticationError(DomainException):
    """An editor is required but none was identified.

    HTTP Status: 401
    """

    pass


class MergeLookupError(DomainException):
    """Submitted merge data references a release or medium that wasn't loaded.

    The form was built from the loaded releases, so a miss here means the
    request is inconsistent with the database. This is fatal to the request
    and never retried.

    HTTP Status: 500
    """

    def __init__(self, entity_type: str, entity_id: Any) -> None:
        super().__init__(f"Couldn't find {entity_type} {entity_id} among the releases being merged")
        self.entity_type = entity_type
        self.entity_id = entity_id


EntityNotFoundError = EntityNotFoundException

__all__ = [
    "AuthenticationError",
    "BusinessRuleViolation",
    "DomainException",
    "EntityNotFoundError",
    "EntityNotFoundException",
    "MergeLookupError",
]
