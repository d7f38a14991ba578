"""Domain exceptions.

All domain-level errors raised by the taxonomy engine. Repositories raise
them inside a unit of work; the unit of work rolls back and re-raises them
unchanged so the API layer can translate them into responses.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    All domain errors should inherit from this class to allow
    catching domain-specific errors at the application layer.
    """

    error_code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(DomainError):
    """Raised when a referenced name or id does not exist.

    Covers organizational units, value types, params, classes, parent
    classes, products and param names outside a class's attribute closure.
    """

    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, key: Any) -> None:
        """Initialize not found error.

        Args:
            entity_type: Kind of entity (e.g., "Class", "ValueType").
            key: Name or id that was looked up.
        """
        super().__init__(
            f"{entity_type} not found: {key}",
            details={"entity_type": entity_type, "key": key},
        )


class InvalidPlacementError(DomainError):
    """Raised when a product is attached to a class that has children."""

    error_code = "INVALID_PLACEMENT"

    def __init__(self, class_name: str, child_count: int) -> None:
        """Initialize invalid placement error.

        Args:
            class_name: Name of the non-leaf class.
            child_count: Number of direct children the class has.
        """
        super().__init__(
            f"Cannot attach product to non-leaf class '{class_name}' "
            f"({child_count} children)",
            details={"class_name": class_name, "child_count": child_count},
        )


class ConflictError(DomainError):
    """Raised on a uniqueness violation.

    Duplicate names, duplicate (class, param) bindings and duplicate
    (product, class param) values all end up here.
    """

    error_code = "CONFLICT"

    def __init__(self, entity_type: str, key: Any, reason: str = "already exists") -> None:
        """Initialize conflict error.

        Args:
            entity_type: Kind of entity.
            key: Conflicting name or key.
            reason: What collided.
        """
        super().__init__(
            f"{entity_type} '{key}' {reason}",
            details={"entity_type": entity_type, "key": key, "reason": reason},
        )


class ValidationError(DomainError):
    """Raised when input fails a basic shape check (e.g., empty name)."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str) -> None:
        """Initialize validation error.

        Args:
            field: Input field that failed the check.
            reason: Why the value was rejected.
        """
        super().__init__(
            f"Invalid {field}: {reason}",
            details={"field": field, "reason": reason},
        )


class InternalError(DomainError):
    """Raised when stored data breaks referential integrity.

    A class row pointing at a parent that never materializes while the tree
    is rebuilt indicates a storage bug, not a caller error.
    """

    error_code = "INTERNAL_ERROR"
