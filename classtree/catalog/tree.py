"""In-memory reconstruction of the class tree from flat rows.

Classes are stored as rows with a parent pointer. Rebuilding the tree takes
two passes over the rows:

    1. index every row by id, creating one ClassNode per row;
    2. attach each node to its parent's children list.

A row whose parent id was never indexed is an orphan. Dropping it silently
would hide a referential-integrity bug in storage, so it raises InternalError.
"""

from collections.abc import Iterable
from typing import NamedTuple

from classtree.domain.entities import ClassNode
from classtree.domain.exceptions import InternalError


class ClassRow(NamedTuple):
    """Flat class row as read from storage."""

    id: int
    name: str
    parent_id: int | None


def _index(rows: Iterable[ClassRow]) -> dict[int, ClassNode]:
    nodes: dict[int, ClassNode] = {}
    for row in rows:
        nodes[row.id] = ClassNode(id=row.id, name=row.name, parent_id=row.parent_id)
    return nodes


def _attach(node: ClassNode, nodes: dict[int, ClassNode]) -> None:
    parent = nodes.get(node.parent_id)
    if parent is None:
        raise InternalError(
            f"Class {node.id} ({node.name}) references missing parent {node.parent_id}",
            details={"class_id": node.id, "parent_id": node.parent_id},
        )
    parent.children.append(node)


def build_forest(rows: Iterable[ClassRow]) -> list[ClassNode]:
    """Build every tree of the taxonomy.

    Args:
        rows: All class rows, in id order.

    Returns:
        Root classes (those without a parent) with children attached.

    Raises:
        InternalError: If a row references a parent that is not among the rows.
    """
    nodes = _index(rows)
    roots: list[ClassNode] = []
    for node in nodes.values():
        if node.parent_id is None:
            roots.append(node)
        else:
            _attach(node, nodes)
    return roots


def build_subtree(root_id: int, rows: Iterable[ClassRow]) -> ClassNode:
    """Build the subtree hanging from one class.

    The row with root_id becomes the returned root regardless of its own
    parent; every other row is attached under its direct parent.

    Args:
        root_id: Id of the subtree root.
        rows: The root row and all of its descendants.

    Returns:
        The subtree root.

    Raises:
        InternalError: If the root row is missing or a descendant is orphaned.
    """
    nodes = _index(rows)
    root = nodes.get(root_id)
    if root is None:
        raise InternalError(
            f"Subtree root {root_id} missing from its own closure",
            details={"class_id": root_id},
        )
    for node in nodes.values():
        if node is not root:
            _attach(node, nodes)
    return root
