"""Domain entities for the class taxonomy.

These are plain data carriers shared by the catalog repositories, the
application service and the API converters. Ids are None until the
entity has been stored.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass
class OrganizationalUnit:
    """Naming/ownership entity attached to classes and params.

    Attributes:
        name: Unique unit name.
        short_name: Abbreviation shown next to values.
        id: Storage id.
    """

    name: str
    short_name: str = ""
    id: int | None = None


@dataclass
class ValueType:
    """Named scalar type a param may hold."""

    name: str
    id: int | None = None


@dataclass
class Param:
    """Reusable named, typed attribute definition.

    Attributes:
        name: Unique param name.
        value_type: Name of the value type.
        unit: Owning organizational unit, None once the unit was deleted.
        id: Storage id.
        declared_by: Id of the class whose binding declared this param.
            Only set on params resolved through a class.
    """

    name: str
    value_type: str
    unit: OrganizationalUnit | None = None
    id: int | None = None
    declared_by: int | None = None


@dataclass
class ClassNode:
    """Node of the class tree.

    Attributes:
        name: Unique class name.
        unit: Owning organizational unit.
        params: Own params, or the full attribute closure when read with
            inherited params.
        children: Direct subclasses.
        id: Storage id.
        parent_id: Storage id of the parent class, None for a root.
    """

    name: str
    unit: OrganizationalUnit | None = None
    params: list[Param] = field(default_factory=list)
    children: list["ClassNode"] = field(default_factory=list)
    id: int | None = None
    parent_id: int | None = None

    @property
    def is_leaf(self) -> bool:
        """Check whether the class has no children."""
        return not self.children

    def walk(self) -> Iterator["ClassNode"]:
        """Iterate over this node and its descendants in preorder."""
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class ParamValue:
    """Value a product holds for a param."""

    param: Param
    value: str


@dataclass
class Product:
    """Concrete instance attached to a leaf class.

    Only the parent class name is needed to create a product; reads return
    the stored class and the values joined with their declaring params.
    """

    name: str
    parent_class: ClassNode
    values: list[ParamValue] = field(default_factory=list)
    id: int | None = None
