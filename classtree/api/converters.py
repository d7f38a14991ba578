"""Converters between API schemas and domain entities."""

from classtree.api.schemas import (
    ClassSchema,
    ParamSchema,
    ParamValueSchema,
    ProductResponse,
    ProductSchema,
    UnitSchema,
    ValueTypeSchema,
)
from classtree.domain.entities import (
    ClassNode,
    OrganizationalUnit,
    Param,
    ParamValue,
    Product,
    ValueType,
)


# ============================================================================
# Entity -> Schema
# ============================================================================


def unit_to_schema(unit: OrganizationalUnit | None) -> UnitSchema | None:
    """Convert OrganizationalUnit entity to schema."""
    if unit is None:
        return None
    return UnitSchema(id=unit.id, name=unit.name, short_name=unit.short_name)


def value_type_to_schema(value_type: ValueType) -> ValueTypeSchema:
    """Convert ValueType entity to schema."""
    return ValueTypeSchema(id=value_type.id, name=value_type.name)


def param_to_schema(param: Param) -> ParamSchema:
    """Convert Param entity to schema."""
    return ParamSchema(
        id=param.id,
        name=param.name,
        value_type=param.value_type,
        unit=unit_to_schema(param.unit),
        declared_by=param.declared_by,
    )


def class_to_schema(node: ClassNode) -> ClassSchema:
    """Convert ClassNode entity (with its subtree) to schema."""
    return ClassSchema(
        id=node.id,
        name=node.name,
        parent_id=node.parent_id,
        unit=unit_to_schema(node.unit),
        params=[param_to_schema(p) for p in node.params],
        children=[class_to_schema(child) for child in node.children],
    )


def product_to_response(product: Product) -> ProductResponse:
    """Convert Product entity to response schema."""
    return ProductResponse(
        id=product.id,
        name=product.name,
        parent_class=class_to_schema(product.parent_class),
        values=[
            ParamValueSchema(
                param=item.param.name,
                value=item.value,
                value_type=item.param.value_type,
                declared_by=item.param.declared_by,
            )
            for item in product.values
        ],
    )


# ============================================================================
# Schema -> Entity
# ============================================================================


def unit_from_schema(schema: UnitSchema | None) -> OrganizationalUnit | None:
    """Convert unit schema to entity."""
    if schema is None:
        return None
    return OrganizationalUnit(name=schema.name, short_name=schema.short_name, id=schema.id)


def class_from_schema(schema: ClassSchema, class_id: int | None = None) -> ClassNode:
    """Convert a submitted subtree to ClassNode entities.

    Args:
        schema: Submitted subtree.
        class_id: Id of the class being replaced, overriding schema.id.
    """
    return ClassNode(
        id=class_id if class_id is not None else schema.id,
        name=schema.name,
        parent_id=schema.parent_id,
        unit=unit_from_schema(schema.unit),
        params=[
            Param(name=p.name, value_type=p.value_type, unit=unit_from_schema(p.unit))
            for p in schema.params
        ],
        children=[class_from_schema(child) for child in schema.children],
    )


def product_from_schema(schema: ProductSchema, product_id: int | None = None) -> Product:
    """Convert a submitted product to a Product entity.

    Values reference params by name only; their types come from the
    class's attribute closure.
    """
    return Product(
        id=product_id,
        name=schema.name,
        parent_class=ClassNode(name=schema.parent_class),
        values=[
            ParamValue(param=Param(name=v.param, value_type=v.value_type or ""), value=v.value)
            for v in schema.values
        ],
    )
