"""Registries for organizational units, value types and params.

All three are flat name-keyed tables with get-or-create semantics:
`ensure` returns the id of the row with the given name, inserting it
first when absent.
"""

from sqlalchemy import delete, select

from classtree.catalog.base import Repository, require_name
from classtree.domain.entities import OrganizationalUnit, Param, ValueType
from classtree.domain.exceptions import ConflictError, NotFoundError
from classtree.infrastructure.models import (
    OrganizationalUnitModel,
    ParamModel,
    ValueTypeModel,
)


def unit_to_entity(model: OrganizationalUnitModel | None) -> OrganizationalUnit | None:
    """Convert a unit row to a domain entity."""
    if model is None:
        return None
    return OrganizationalUnit(id=model.id, name=model.name, short_name=model.short_name)


def param_to_entity(model: ParamModel, declared_by: int | None = None) -> Param:
    """Convert a param row (with joined value type and unit) to a domain entity."""
    return Param(
        id=model.id,
        name=model.name,
        value_type=model.value_type.name,
        unit=unit_to_entity(model.unit),
        declared_by=declared_by,
    )


class UnitRegistry(Repository):
    """Organizational unit registry."""

    async def ensure(self, name: str, short_name: str = "") -> int:
        """Get or create a unit by name.

        An existing unit keeps its stored short name.

        Args:
            name: Unit name.
            short_name: Short name used when the unit is created.

        Returns:
            Unit id.
        """
        require_name("unit name", name)
        result = await self.session.execute(
            select(OrganizationalUnitModel.id).where(OrganizationalUnitModel.name == name)
        )
        unit_id = result.scalar_one_or_none()
        if unit_id is not None:
            return unit_id

        model = OrganizationalUnitModel(name=name, short_name=short_name or "")
        self.session.add(model)
        await self._flush("OrganizationalUnit", name)
        return model.id

    async def list(self, name: str | None = None) -> list[OrganizationalUnit]:
        """List units, optionally filtered by exact name."""
        query = select(OrganizationalUnitModel).order_by(OrganizationalUnitModel.id)
        if name:
            query = query.where(OrganizationalUnitModel.name == name)
        result = await self.session.execute(query)
        return [unit_to_entity(m) for m in result.scalars().all()]

    async def get_by_name(self, name: str) -> OrganizationalUnitModel:
        """Get unit row by name.

        Raises:
            NotFoundError: If no unit has this name.
        """
        result = await self.session.execute(
            select(OrganizationalUnitModel).where(OrganizationalUnitModel.name == name)
        )
        model = result.scalar_one_or_none()
        if model is None:
            raise NotFoundError("OrganizationalUnit", name)
        return model

    async def delete(self, name: str) -> None:
        """Delete a unit.

        Params owned by the unit lose their owner; classes owned by it are
        deleted together with their subtrees and products.
        """
        model = await self.get_by_name(name)
        await self.session.execute(
            delete(OrganizationalUnitModel)
            .where(OrganizationalUnitModel.id == model.id)
            .execution_options(synchronize_session=False)
        )
        self.session.expunge_all()


class ValueTypeRegistry(Repository):
    """Value type registry."""

    async def ensure(self, name: str) -> int:
        """Get or create a value type by name.

        Returns:
            Value type id.
        """
        require_name("value type name", name)
        result = await self.session.execute(
            select(ValueTypeModel.id).where(ValueTypeModel.name == name)
        )
        type_id = result.scalar_one_or_none()
        if type_id is not None:
            return type_id

        model = ValueTypeModel(name=name)
        self.session.add(model)
        await self._flush("ValueType", name)
        return model.id

    async def list(self, name: str | None = None) -> list[ValueType]:
        """List value types, optionally filtered by exact name."""
        query = select(ValueTypeModel).order_by(ValueTypeModel.id)
        if name:
            query = query.where(ValueTypeModel.name == name)
        result = await self.session.execute(query)
        return [ValueType(id=m.id, name=m.name) for m in result.scalars().all()]

    async def get_by_name(self, name: str) -> ValueTypeModel:
        """Get value type row by name.

        Raises:
            NotFoundError: If no value type has this name.
        """
        result = await self.session.execute(
            select(ValueTypeModel).where(ValueTypeModel.name == name)
        )
        model = result.scalar_one_or_none()
        if model is None:
            raise NotFoundError("ValueType", name)
        return model

    async def delete(self, name: str) -> None:
        """Delete a value type along with every param of that type."""
        model = await self.get_by_name(name)
        await self.session.execute(
            delete(ValueTypeModel)
            .where(ValueTypeModel.id == model.id)
            .execution_options(synchronize_session=False)
        )
        self.session.expunge_all()


class ParamRegistry(Repository):
    """Param catalog.

    Params are global definitions; binding one to a class is the job of
    the class hierarchy.
    """

    async def ensure(self, param: Param) -> int:
        """Get or create a param by name.

        Args:
            param: Param definition; value_type and unit are referenced by name.

        Returns:
            Param id.

        Raises:
            NotFoundError: If the value type or unit does not exist.
            ConflictError: If a param with this name exists with another value type.
        """
        require_name("param name", param.name)
        result = await self.session.execute(
            select(ParamModel).where(ParamModel.name == param.name)
        )
        existing = result.scalar_one_or_none()
        if existing is not None:
            if param.value_type and existing.value_type.name != param.value_type:
                raise ConflictError(
                    "Param",
                    param.name,
                    reason=f"is already declared with value type '{existing.value_type.name}'",
                )
            return existing.id

        value_type = await ValueTypeRegistry(self.session).get_by_name(param.value_type)
        unit = None
        if param.unit is not None:
            unit = await UnitRegistry(self.session).get_by_name(param.unit.name)

        model = ParamModel(name=param.name, value_type=value_type, unit=unit)
        self.session.add(model)
        await self._flush("Param", param.name)
        return model.id

    async def list(self, name: str | None = None) -> list[Param]:
        """List params, optionally filtered by exact name."""
        query = select(ParamModel).order_by(ParamModel.id)
        if name:
            query = query.where(ParamModel.name == name)
        result = await self.session.execute(query)
        return [param_to_entity(m) for m in result.scalars().unique().all()]
