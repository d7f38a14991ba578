"""Tests for the class hierarchy repository."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from classtree.catalog import ClassHierarchy
from classtree.domain.entities import ClassNode, OrganizationalUnit, Param
from classtree.domain.exceptions import ConflictError, NotFoundError, ValidationError


@pytest.fixture
async def hierarchy(session: AsyncSession, vehicle_tree: ClassNode) -> ClassHierarchy:
    """Hierarchy with the example taxonomy stored."""
    hierarchy = ClassHierarchy(session)
    await hierarchy.create_subtree(vehicle_tree)
    return hierarchy


class TestCreateSubtree:
    """Tests for ClassHierarchy.create_subtree."""

    async def test_ids_follow_preorder(self, hierarchy: ClassHierarchy) -> None:
        """Classes are inserted parent first, children in order."""
        roots = await hierarchy.read_full_tree()
        assert [(n.id, n.name) for n in roots[0].walk()] == [
            (1, "Vehicle"),
            (2, "Car"),
            (3, "Tesla"),
            (4, "Sedan"),
            (5, "Truck"),
        ]

    async def test_under_explicit_parent(
        self, hierarchy: ClassHierarchy, unit: OrganizationalUnit
    ) -> None:
        """A submitted parent_id attaches the new subtree under it."""
        car = await hierarchy.get_by_name("Car")
        new_id = await hierarchy.create_subtree(
            ClassNode(name="Coupe", unit=unit, parent_id=car.id)
        )

        node = await hierarchy.read_node(new_id)
        assert node.parent_id == car.id
        subtree = await hierarchy.read_subtree_by_name("Car")
        assert [c.name for c in subtree.children] == ["Tesla", "Sedan", "Coupe"]

    async def test_missing_parent(
        self, hierarchy: ClassHierarchy, unit: OrganizationalUnit
    ) -> None:
        """An unknown parent id is rejected."""
        with pytest.raises(NotFoundError):
            await hierarchy.create_subtree(ClassNode(name="Boat", unit=unit, parent_id=999))

    async def test_duplicate_root_name(
        self, hierarchy: ClassHierarchy, unit: OrganizationalUnit
    ) -> None:
        """A parentless class with a stored name conflicts."""
        with pytest.raises(ConflictError):
            await hierarchy.create_subtree(ClassNode(name="Car", unit=unit))

    async def test_duplicate_child_name(
        self, hierarchy: ClassHierarchy, unit: OrganizationalUnit
    ) -> None:
        """A child whose name is already stored conflicts."""
        node = ClassNode(name="Boat", unit=unit, children=[ClassNode(name="Tesla", unit=unit)])
        with pytest.raises(ConflictError):
            await hierarchy.create_subtree(node)

    async def test_unknown_unit(self, session: AsyncSession) -> None:
        """Classes must belong to a registered unit."""
        with pytest.raises(NotFoundError):
            await ClassHierarchy(session).create_subtree(
                ClassNode(name="Boat", unit=OrganizationalUnit(name="nope"))
            )

    async def test_missing_unit(self, session: AsyncSession) -> None:
        """Classes without a unit are rejected."""
        with pytest.raises(ValidationError):
            await ClassHierarchy(session).create_subtree(ClassNode(name="Boat"))

    async def test_empty_name(self, session: AsyncSession, unit: OrganizationalUnit) -> None:
        """Classes need a name."""
        with pytest.raises(ValidationError):
            await ClassHierarchy(session).create_subtree(ClassNode(name="", unit=unit))

    async def test_param_declared_twice_on_one_class(
        self, session: AsyncSession, unit: OrganizationalUnit
    ) -> None:
        """A class cannot bind the same param twice."""
        node = ClassNode(
            name="Boat",
            unit=unit,
            params=[
                Param(name="length", value_type="float"),
                Param(name="length", value_type="float"),
            ],
        )
        with pytest.raises(ConflictError):
            await ClassHierarchy(session).create_subtree(node)


class TestReadHierarchy:
    """Tests for hierarchy reads."""

    async def test_read_node_own_params(self, hierarchy: ClassHierarchy) -> None:
        """By default a class carries only its own params."""
        tesla = await hierarchy.get_by_name("Tesla")
        node = await hierarchy.read_node(tesla.id)

        assert node.name == "Tesla"
        assert node.unit is not None
        assert node.unit.name == "U1"
        assert [p.name for p in node.params] == ["range_km"]
        assert node.children == []

    async def test_attribute_closure_root_first(self, hierarchy: ClassHierarchy) -> None:
        """Inherited params come root first, own params last."""
        tesla = await hierarchy.get_by_name("Tesla")
        node = await hierarchy.read_node(tesla.id, include_inherited_params=True)

        assert [p.name for p in node.params] == ["color", "doors", "range_km"]
        assert [p.value_type for p in node.params] == ["string", "int", "int"]

    async def test_attribute_closure_declaring_class(self, hierarchy: ClassHierarchy) -> None:
        """Each inherited param names the class that declared it."""
        vehicle = await hierarchy.get_by_name("Vehicle")
        car = await hierarchy.get_by_name("Car")
        sedan = await hierarchy.get_by_name("Sedan")

        params = await hierarchy.attribute_closure(sedan.id)
        assert [(p.name, p.declared_by) for p in params] == [
            ("color", vehicle.id),
            ("doors", car.id),
        ]

    async def test_attribute_closure_of_root(self, hierarchy: ClassHierarchy) -> None:
        """A root's closure is its own params."""
        vehicle = await hierarchy.get_by_name("Vehicle")
        params = await hierarchy.attribute_closure(vehicle.id)
        assert [p.name for p in params] == ["color"]

    async def test_same_param_at_two_levels(
        self, hierarchy: ClassHierarchy, unit: OrganizationalUnit
    ) -> None:
        """Redeclaring a param lower down lists it once per declaring class."""
        truck = await hierarchy.get_by_name("Truck")
        new_id = await hierarchy.create_subtree(
            ClassNode(
                name="Firetruck",
                unit=unit,
                parent_id=truck.id,
                params=[Param(name="color", value_type="string")],
            )
        )

        params = await hierarchy.attribute_closure(new_id)
        assert [p.name for p in params] == ["color", "payload", "color"]
        assert params[-1].declared_by == new_id

    async def test_read_full_tree(self, hierarchy: ClassHierarchy, unit: OrganizationalUnit) -> None:
        """The forest holds every root with its descendants."""
        await hierarchy.create_subtree(ClassNode(name="Fruit", unit=unit))

        roots = await hierarchy.read_full_tree()
        assert [r.name for r in roots] == ["Vehicle", "Fruit"]
        assert [c.name for c in roots[0].children] == ["Car", "Truck"]
        assert roots[1].is_leaf

    async def test_read_subtree_by_name(self, hierarchy: ClassHierarchy) -> None:
        """A subtree holds the named class and all of its descendants."""
        vehicle = await hierarchy.get_by_name("Vehicle")
        car = await hierarchy.read_subtree_by_name("Car")

        assert car.parent_id == vehicle.id
        assert car.unit is not None
        assert [n.name for n in car.walk()] == ["Car", "Tesla", "Sedan"]

    async def test_read_subtree_of_leaf(self, hierarchy: ClassHierarchy) -> None:
        """A leaf's subtree is the leaf alone."""
        sedan = await hierarchy.read_subtree_by_name("Sedan")
        assert sedan.is_leaf

    async def test_read_subtree_unknown(self, hierarchy: ClassHierarchy) -> None:
        """Unknown names raise NotFoundError."""
        with pytest.raises(NotFoundError):
            await hierarchy.read_subtree_by_name("Boat")

    async def test_read_node_unknown(self, hierarchy: ClassHierarchy) -> None:
        """Unknown ids raise NotFoundError."""
        with pytest.raises(NotFoundError):
            await hierarchy.read_node(999)


class TestUpdateDelete:
    """Tests for destructive update and delete."""

    async def test_update_replaces_params_and_children(
        self, hierarchy: ClassHierarchy, unit: OrganizationalUnit
    ) -> None:
        """Only the submitted params and children remain after update."""
        car = await hierarchy.get_by_name("Car")
        new_id = await hierarchy.update_node(
            ClassNode(
                id=car.id,
                name="Car",
                unit=unit,
                params=[Param(name="wheels", value_type="int")],
                children=[ClassNode(name="Coupe", unit=unit)],
            )
        )

        assert new_id != car.id
        node = await hierarchy.read_node(new_id)
        assert [p.name for p in node.params] == ["wheels"]
        subtree = await hierarchy.read_subtree_by_name("Car")
        assert [c.name for c in subtree.children] == ["Coupe"]
        with pytest.raises(NotFoundError):
            await hierarchy.get_by_name("Tesla")

    async def test_update_keeps_parent(
        self, hierarchy: ClassHierarchy, unit: OrganizationalUnit
    ) -> None:
        """A replaced non-root class stays under its parent."""
        vehicle = await hierarchy.get_by_name("Vehicle")
        truck = await hierarchy.get_by_name("Truck")

        new_id = await hierarchy.update_node(ClassNode(id=truck.id, name="Truck", unit=unit))

        node = await hierarchy.read_node(new_id)
        assert node.parent_id == vehicle.id

    async def test_update_root_stays_root(
        self, hierarchy: ClassHierarchy, unit: OrganizationalUnit
    ) -> None:
        """A replaced root is still a root."""
        vehicle = await hierarchy.get_by_name("Vehicle")
        new_id = await hierarchy.update_node(
            ClassNode(id=vehicle.id, name="Vehicle", unit=unit)
        )

        roots = await hierarchy.read_full_tree()
        assert [(r.id, r.name) for r in roots] == [(new_id, "Vehicle")]
        assert roots[0].is_leaf

    async def test_update_without_id(
        self, hierarchy: ClassHierarchy, unit: OrganizationalUnit
    ) -> None:
        """Update needs the id of the class to replace."""
        with pytest.raises(ValidationError):
            await hierarchy.update_node(ClassNode(name="Car", unit=unit))

    async def test_delete_cascades_to_descendants(self, hierarchy: ClassHierarchy) -> None:
        """Deleting a class removes its whole subtree."""
        car = await hierarchy.get_by_name("Car")
        await hierarchy.delete_node(car.id)

        roots = await hierarchy.read_full_tree()
        assert [n.name for n in roots[0].walk()] == ["Vehicle", "Truck"]

    async def test_delete_unknown(self, hierarchy: ClassHierarchy) -> None:
        """Deleting an unknown id raises NotFoundError."""
        with pytest.raises(NotFoundError):
            await hierarchy.delete_node(999)
