"""Taxonomy catalog.

Repositories for the registries, the class hierarchy with attribute
resolution, and the product catalog. All of them work inside a unit of
work supplied by the caller.
"""

from classtree.catalog.hierarchy import ClassHierarchy
from classtree.catalog.products import ProductCatalog
from classtree.catalog.registry import ParamRegistry, UnitRegistry, ValueTypeRegistry
from classtree.catalog.tree import ClassRow, build_forest, build_subtree

__all__ = [
    # Registries
    "ParamRegistry",
    "UnitRegistry",
    "ValueTypeRegistry",
    # Hierarchy
    "ClassHierarchy",
    "ClassRow",
    "build_forest",
    "build_subtree",
    # Products
    "ProductCatalog",
]
