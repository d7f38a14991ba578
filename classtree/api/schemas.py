"""API schemas for the classtree API.

Pydantic models for request/response validation and serialization.
"""

from typing import Annotated, Any

from pydantic import BaseModel, Field, field_validator


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] | list[Any] = Field(
        default_factory=dict, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class IdsResponse(BaseModel):
    """Ids of the entities created by a batch request, in submission order."""

    ids: list[int]


class IdResponse(BaseModel):
    """Id of a replaced entity."""

    id: int


# ============================================================================
# Registry Schemas
# ============================================================================


class UnitSchema(BaseModel):
    """Organizational unit."""

    id: int | None = None
    name: str = Field(..., max_length=250, description="Unique unit name")
    short_name: str = Field(default="", max_length=20, description="Abbreviation")


class UnitsRequest(BaseModel):
    """Request to ensure organizational units."""

    units: list[UnitSchema] = Field(..., min_length=1)


class UnitsResponse(BaseModel):
    """List of organizational units."""

    units: list[UnitSchema]


class ValueTypeSchema(BaseModel):
    """Value type."""

    id: int | None = None
    name: str = Field(..., max_length=20)


class ValueTypesRequest(BaseModel):
    """Request to ensure value types."""

    names: list[Annotated[str, Field(max_length=20)]] = Field(..., min_length=1)


class ValueTypesResponse(BaseModel):
    """List of value types."""

    value_types: list[ValueTypeSchema]


class ParamSchema(BaseModel):
    """Param definition.

    On reads, declared_by holds the id of the class whose binding
    declared the param.
    """

    id: int | None = None
    name: str = Field(..., max_length=200)
    value_type: str = Field(..., max_length=20)
    unit: UnitSchema | None = None
    declared_by: int | None = None


class ParamsResponse(BaseModel):
    """List of params."""

    params: list[ParamSchema]


# ============================================================================
# Class Schemas
# ============================================================================


class ClassSchema(BaseModel):
    """Class tree node.

    Used both for submitting subtrees and for returning them. On reads,
    params are either the class's own params or its attribute closure.
    """

    id: int | None = None
    name: str = Field(..., max_length=300)
    parent_id: int | None = None
    unit: UnitSchema | None = None
    params: list[ParamSchema] = Field(default_factory=list)
    children: list["ClassSchema"] = Field(default_factory=list)


class ClassesRequest(BaseModel):
    """Request to create class subtrees."""

    classes: list[ClassSchema] = Field(..., min_length=1)


class ClassTreeResponse(BaseModel):
    """Whole class forest."""

    roots: list[ClassSchema]


# ============================================================================
# Product Schemas
# ============================================================================


class ParamValueSchema(BaseModel):
    """Value held by a product for one param.

    Scalar values are accepted and stored as their string form.
    """

    param: str = Field(..., max_length=200, description="Param name from the class's attribute closure")
    value: str = Field(..., max_length=300)
    value_type: str | None = Field(default=None, max_length=20)
    declared_by: int | None = None

    @field_validator("value", mode="before")
    @classmethod
    def stringify_value(cls, value: Any) -> Any:
        """Store booleans and numbers as text."""
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, (int, float)):
            return str(value)
        return value


class ProductSchema(BaseModel):
    """Product request schema."""

    name: str = Field(..., max_length=300)
    parent_class: str = Field(..., max_length=300, description="Name of a leaf class")
    values: list[ParamValueSchema] = Field(default_factory=list)


class ProductsRequest(BaseModel):
    """Request to create products."""

    products: list[ProductSchema] = Field(..., min_length=1)


class ProductResponse(BaseModel):
    """Stored product with its class and values."""

    id: int
    name: str
    parent_class: ClassSchema
    values: list[ParamValueSchema]


class ProductsResponse(BaseModel):
    """Products of one class."""

    products: list[ProductResponse]
