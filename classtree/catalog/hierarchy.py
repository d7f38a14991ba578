"""Class hierarchy and attribute resolution.

Builds, traverses and mutates the class tree stored in the `classes` table,
and resolves the attribute closure of a class: its own params plus the params
of every ancestor, root first.

Every method runs inside the caller's unit of work and never commits.
"""

from sqlalchemy import Integer, delete, literal, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from classtree.catalog.base import Repository, require_name
from classtree.catalog.registry import ParamRegistry, UnitRegistry, param_to_entity, unit_to_entity
from classtree.catalog.tree import ClassRow, build_forest, build_subtree
from classtree.domain.entities import ClassNode, Param
from classtree.domain.exceptions import ConflictError, NotFoundError, ValidationError
from classtree.infrastructure.models import ClassModel, ClassParamModel, ProductModel


class ClassHierarchy(Repository):
    """Repository for the class tree.

    Example usage:
        hierarchy = ClassHierarchy(session)
        vehicle_id = await hierarchy.create_subtree(
            ClassNode(
                name="Vehicle",
                unit=OrganizationalUnit(name="U1"),
                params=[Param(name="color", value_type="string")],
                children=[ClassNode(name="Car", unit=OrganizationalUnit(name="U1"))],
            )
        )
        car = await hierarchy.read_subtree_by_name("Car")
        params = await hierarchy.attribute_closure(car.id)
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.units = UnitRegistry(session)
        self.params = ParamRegistry(session)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create_subtree(self, node: ClassNode, parent_id: int | None = None) -> int:
        """Insert a class and its whole subtree, preorder.

        Parent resolution:
            - an explicit non-zero parent_id is used as is (the recursive
              path, where the parent was just inserted);
            - otherwise node.parent_id is used when set;
            - otherwise the stored edge for node.name is looked up. Class
              names are unique, so a stored class with that name means the
              node collides with it; an unknown name becomes a new root.

        Args:
            node: Class to insert, with its own params and children.
            parent_id: Id of an already stored parent class.

        Returns:
            Id of the inserted class.

        Raises:
            NotFoundError: If the parent, the unit or a param's value type is missing.
            ConflictError: If the name or a (class, param) binding already exists.
        """
        require_name("class name", node.name)
        if not parent_id:
            parent_id = node.parent_id or None
        if parent_id:
            await self.get(parent_id)
        else:
            parent_id = await self._resolve_parent(node.name)

        if node.unit is None:
            raise ValidationError("class unit", f"class '{node.name}' has no organizational unit")
        unit = await self.units.get_by_name(node.unit.name)

        model = ClassModel(name=node.name, parent_id=parent_id, unit=unit)
        self.session.add(model)
        await self._flush("Class", node.name)

        await self._bind_params(model.id, node.name, node.params)

        for child in node.children:
            await self.create_subtree(child, model.id)

        return model.id

    async def _bind_params(self, class_id: int, class_name: str, params: list[Param]) -> None:
        for param in params:
            param_id = await self.params.ensure(param)
            self.session.add(ClassParamModel(class_id=class_id, param_id=param_id))
            await self._flush("ClassParam", f"{class_name}.{param.name}")

    async def _resolve_parent(self, name: str) -> int | None:
        """Resolve the parent of a class submitted without one.

        A stored class with the same name would collide with the insert, so
        only unknown names resolve, always to None (a new root).

        Raises:
            ConflictError: If a class with this name is already stored.
        """
        result = await self.session.execute(
            select(ClassModel.id, ClassModel.parent_id).where(ClassModel.name == name)
        )
        row = result.one_or_none()
        if row is not None:
            raise ConflictError("Class", name)
        return None

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    async def get(self, class_id: int) -> ClassModel:
        """Get class row by id.

        Raises:
            NotFoundError: If the class does not exist.
        """
        result = await self.session.execute(
            select(ClassModel).where(ClassModel.id == class_id)
        )
        model = result.scalar_one_or_none()
        if model is None:
            raise NotFoundError("Class", class_id)
        return model

    async def get_by_name(self, name: str) -> ClassModel:
        """Get class row by name.

        Raises:
            NotFoundError: If no class has this name.
        """
        result = await self.session.execute(
            select(ClassModel).where(ClassModel.name == name)
        )
        model = result.scalar_one_or_none()
        if model is None:
            raise NotFoundError("Class", name)
        return model

    async def read_node(self, class_id: int, include_inherited_params: bool = False) -> ClassNode:
        """Read one class with its unit and params.

        Args:
            class_id: Class id.
            include_inherited_params: Return the attribute closure instead of
                the class's own params.

        Returns:
            The class without children.
        """
        model = await self.get(class_id)
        if include_inherited_params:
            params = await self.attribute_closure(class_id)
        else:
            params = await self.own_params(class_id)
        return ClassNode(
            id=model.id,
            name=model.name,
            parent_id=model.parent_id,
            unit=unit_to_entity(model.unit),
            params=params,
        )

    async def own_params(self, class_id: int) -> list[Param]:
        """Params declared directly by a class, in declaration order."""
        result = await self.session.execute(
            select(ClassParamModel)
            .where(ClassParamModel.class_id == class_id)
            .order_by(ClassParamModel.id)
            .execution_options(populate_existing=True)
        )
        return [param_to_entity(cp.param, declared_by=cp.class_id) for cp in result.scalars().all()]

    async def attribute_closure(self, class_id: int) -> list[Param]:
        """Resolve every param visible to a class.

        Walks parent links from the class up to its root with a recursive
        CTE and collects the class params declared at each level. The root's
        params come first, the class's own params last; within a level,
        declaration order is kept. Each param carries the id of the class
        that declared it, so the same param declared at two levels shows up
        twice with different owners.

        Args:
            class_id: Class id.

        Returns:
            Inherited params, ancestor first.
        """
        ancestors = (
            select(
                ClassModel.id.label("id"),
                ClassModel.parent_id.label("parent_id"),
                literal(0, Integer).label("depth"),
            )
            .where(ClassModel.id == class_id)
            .cte("ancestors", recursive=True)
        )
        parent = aliased(ClassModel)
        ancestors = ancestors.union_all(
            select(parent.id, parent.parent_id, ancestors.c.depth + 1).join(
                ancestors, parent.id == ancestors.c.parent_id
            )
        )

        result = await self.session.execute(
            select(ClassParamModel)
            .join(ancestors, ClassParamModel.class_id == ancestors.c.id)
            .order_by(ancestors.c.depth.desc(), ClassParamModel.id)
            .execution_options(populate_existing=True)
        )
        return [param_to_entity(cp.param, declared_by=cp.class_id) for cp in result.scalars().all()]

    async def read_full_tree(self) -> list[ClassNode]:
        """Read every class and rebuild the forest in memory.

        Returns:
            Root classes with children attached, in id order.

        Raises:
            InternalError: If a row references a parent that does not exist.
        """
        result = await self.session.execute(
            select(ClassModel.id, ClassModel.name, ClassModel.parent_id).order_by(ClassModel.id)
        )
        return build_forest(ClassRow(*row) for row in result.all())

    async def read_subtree_by_name(self, name: str) -> ClassNode:
        """Read a class and all of its descendants.

        Args:
            name: Name of the subtree root.

        Returns:
            The named class with its descendants attached.

        Raises:
            NotFoundError: If no class has this name.
        """
        root = await self.get_by_name(name)

        subtree = (
            select(
                ClassModel.id.label("id"),
                ClassModel.name.label("name"),
                ClassModel.parent_id.label("parent_id"),
            )
            .where(ClassModel.id == root.id)
            .cte("subtree", recursive=True)
        )
        child = aliased(ClassModel)
        subtree = subtree.union_all(
            select(child.id, child.name, child.parent_id).join(
                subtree, child.parent_id == subtree.c.id
            )
        )

        result = await self.session.execute(
            select(subtree.c.id, subtree.c.name, subtree.c.parent_id).order_by(subtree.c.id)
        )
        node = build_subtree(root.id, (ClassRow(*row) for row in result.all()))
        node.unit = unit_to_entity(root.unit)
        return node

    async def list_class_products(self, class_id: int) -> list[int]:
        """Ids of the products attached to a class, in creation order.

        Raises:
            NotFoundError: If the class does not exist.
        """
        await self.get(class_id)
        result = await self.session.execute(
            select(ProductModel.id)
            .where(ProductModel.class_id == class_id)
            .order_by(ProductModel.id)
        )
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Update / Delete
    # ------------------------------------------------------------------

    async def update_node(self, node: ClassNode) -> int:
        """Replace a class and its subtree.

        This is NOT a patch: the stored class, all of its descendants, their
        bindings and their products are deleted, then the submitted subtree
        is inserted in its place. Params and children missing from the
        submission are gone afterwards. The new class keeps the stored parent
        unless node.parent_id names another one.

        Args:
            node: Replacement subtree; node.id names the class to replace.

        Returns:
            Id of the recreated class.
        """
        if node.id is None:
            raise ValidationError("class id", "required for update")
        stored = await self.get(node.id)
        parent_id = node.parent_id if node.parent_id is not None else stored.parent_id

        await self.delete_node(node.id)
        return await self.create_subtree(node, parent_id)

    async def delete_node(self, class_id: int) -> None:
        """Delete a class.

        The store cascades the delete to descendant classes, class params,
        products and product values.

        Raises:
            NotFoundError: If the class does not exist.
        """
        await self.get(class_id)
        await self.session.execute(
            delete(ClassModel)
            .where(ClassModel.id == class_id)
            .execution_options(synchronize_session=False)
        )
        self.session.expunge_all()
