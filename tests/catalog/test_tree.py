"""Tests for in-memory class tree reconstruction."""

import pytest

from classtree.catalog.tree import ClassRow, build_forest, build_subtree
from classtree.domain.exceptions import InternalError


class TestBuildForest:
    """Tests for build_forest."""

    def test_builds_nested_roots(self) -> None:
        """Rows become a forest with children attached to their parents."""
        rows = [
            ClassRow(1, "Vehicle", None),
            ClassRow(2, "Car", 1),
            ClassRow(3, "Tesla", 2),
            ClassRow(4, "Fruit", None),
        ]
        roots = build_forest(rows)

        assert [r.name for r in roots] == ["Vehicle", "Fruit"]
        car = roots[0].children[0]
        assert car.name == "Car"
        assert car.parent_id == 1
        assert [c.name for c in car.children] == ["Tesla"]
        assert roots[1].is_leaf

    def test_children_before_parents(self) -> None:
        """Row order does not matter."""
        rows = [ClassRow(3, "Tesla", 2), ClassRow(2, "Car", 1), ClassRow(1, "Vehicle", None)]
        roots = build_forest(rows)
        assert [n.name for n in roots[0].walk()] == ["Vehicle", "Car", "Tesla"]

    def test_empty(self) -> None:
        """No rows give no roots."""
        assert build_forest([]) == []

    def test_orphan_raises(self) -> None:
        """A row pointing at a missing parent is an internal error."""
        rows = [ClassRow(1, "Vehicle", None), ClassRow(2, "Car", 99)]
        with pytest.raises(InternalError) as exc_info:
            build_forest(rows)
        assert exc_info.value.details == {"class_id": 2, "parent_id": 99}


class TestBuildSubtree:
    """Tests for build_subtree."""

    def test_root_keeps_its_parent_id(self) -> None:
        """The subtree root is returned even though its parent is absent."""
        rows = [ClassRow(2, "Car", 1), ClassRow(3, "Tesla", 2), ClassRow(4, "Sedan", 2)]
        root = build_subtree(2, rows)

        assert root.name == "Car"
        assert root.parent_id == 1
        assert [c.name for c in root.children] == ["Tesla", "Sedan"]

    def test_missing_root_raises(self) -> None:
        """A closure without its own root is an internal error."""
        with pytest.raises(InternalError):
            build_subtree(5, [ClassRow(2, "Car", 1)])

    def test_orphan_descendant_raises(self) -> None:
        """A descendant whose parent is outside the closure is an internal error."""
        rows = [ClassRow(2, "Car", 1), ClassRow(7, "Boat", 6)]
        with pytest.raises(InternalError):
            build_subtree(2, rows)
