"""Domain layer: taxonomy entities and errors."""

from classtree.domain.entities import (
    ClassNode,
    OrganizationalUnit,
    Param,
    ParamValue,
    Product,
    ValueType,
)
from classtree.domain.exceptions import (
    ConflictError,
    DomainError,
    InternalError,
    InvalidPlacementError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    # Entities
    "ClassNode",
    "OrganizationalUnit",
    "Param",
    "ParamValue",
    "Product",
    "ValueType",
    # Exceptions
    "ConflictError",
    "DomainError",
    "InternalError",
    "InvalidPlacementError",
    "NotFoundError",
    "ValidationError",
]
