"""Taxonomy application service.

Entry point for every engine operation. Each public method is one unit of
work: all reads and writes run in a single transaction that commits when the
method returns and rolls back when it raises. Domain errors propagate
unchanged so the caller can turn them into responses.

Updates are destructive replaces, not patches:
- update_class deletes the class with its whole subtree (and the products
  under it) and inserts the submitted subtree;
- update_product deletes the product with its values and inserts the
  submitted one.
"""

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from classtree.catalog import (
    ClassHierarchy,
    ParamRegistry,
    ProductCatalog,
    UnitRegistry,
    ValueTypeRegistry,
)
from classtree.domain.entities import (
    ClassNode,
    OrganizationalUnit,
    Param,
    Product,
    ValueType,
)
from classtree.domain.exceptions import DomainError
from classtree.infrastructure.database import Database

logger = structlog.get_logger()

T = TypeVar("T")


class TaxonomyService:
    """Application service for the class taxonomy.

    Example usage:
        service = TaxonomyService(database)
        await service.ensure_units([OrganizationalUnit(name="U1")])
        await service.ensure_value_types(["string", "int"])
        [vehicle_id] = await service.create_classes([vehicle_tree])
        car = await service.read_class_children("Car")
    """

    def __init__(self, database: Database, request_id: str | None = None) -> None:
        """Initialize service.

        Args:
            database: Storage capability providing the unit of work.
            request_id: Request ID for correlation.
        """
        self.database = database
        self.request_id = request_id

    async def _run(
        self,
        operation: str,
        fn: Callable[[AsyncSession], Awaitable[T]],
        **context: Any,
    ) -> T:
        """Run fn as one unit of work, logging domain failures."""
        try:
            return await self.database.run_atomically(fn)
        except DomainError as e:
            logger.warning(
                "Taxonomy operation rejected",
                operation=operation,
                error_code=e.error_code,
                error=e.message,
                request_id=self.request_id,
                **context,
            )
            raise

    # ========================================================================
    # Registries
    # ========================================================================

    async def ensure_units(self, units: list[OrganizationalUnit]) -> list[int]:
        """Get or create organizational units.

        Returns:
            Unit ids in submission order.
        """

        async def fn(session: AsyncSession) -> list[int]:
            registry = UnitRegistry(session)
            return [await registry.ensure(u.name, u.short_name) for u in units]

        ids = await self._run("ensure_units", fn)
        logger.info("Units ensured", unit_ids=ids, request_id=self.request_id)
        return ids

    async def list_units(self, name: str | None = None) -> list[OrganizationalUnit]:
        """List organizational units, optionally by exact name."""
        return await self._run("list_units", lambda s: UnitRegistry(s).list(name))

    async def delete_unit(self, name: str) -> None:
        """Delete a unit; its classes go with it, its params lose their owner."""
        await self._run("delete_unit", lambda s: UnitRegistry(s).delete(name), unit_name=name)
        logger.info("Unit deleted", unit_name=name, request_id=self.request_id)

    async def ensure_value_types(self, names: list[str]) -> list[int]:
        """Get or create value types.

        Returns:
            Value type ids in submission order.
        """

        async def fn(session: AsyncSession) -> list[int]:
            registry = ValueTypeRegistry(session)
            return [await registry.ensure(name) for name in names]

        ids = await self._run("ensure_value_types", fn)
        logger.info("Value types ensured", value_type_ids=ids, request_id=self.request_id)
        return ids

    async def list_value_types(self, name: str | None = None) -> list[ValueType]:
        """List value types, optionally by exact name."""
        return await self._run("list_value_types", lambda s: ValueTypeRegistry(s).list(name))

    async def delete_value_type(self, name: str) -> None:
        """Delete a value type and every param of that type."""
        await self._run(
            "delete_value_type",
            lambda s: ValueTypeRegistry(s).delete(name),
            value_type=name,
        )
        logger.info("Value type deleted", value_type=name, request_id=self.request_id)

    async def list_params(self, name: str | None = None) -> list[Param]:
        """List params, optionally by exact name."""
        return await self._run("list_params", lambda s: ParamRegistry(s).list(name))

    # ========================================================================
    # Classes
    # ========================================================================

    async def create_classes(self, nodes: list[ClassNode]) -> list[int]:
        """Create class subtrees.

        All subtrees are inserted in one transaction; if any of them fails,
        none is stored.

        Returns:
            Ids of the submitted top-level classes.
        """

        async def fn(session: AsyncSession) -> list[int]:
            hierarchy = ClassHierarchy(session)
            return [await hierarchy.create_subtree(node) for node in nodes]

        ids = await self._run("create_classes", fn, class_names=[n.name for n in nodes])
        logger.info(
            "Classes created",
            class_ids=ids,
            class_count=sum(len(list(n.walk())) for n in nodes),
            request_id=self.request_id,
        )
        return ids

    async def read_class(self, class_id: int, all_params: bool = False) -> ClassNode:
        """Read a class with its own params or its full attribute closure."""
        return await self._run(
            "read_class",
            lambda s: ClassHierarchy(s).read_node(class_id, all_params),
            class_id=class_id,
        )

    async def read_class_tree(self) -> list[ClassNode]:
        """Read the whole class forest."""
        return await self._run("read_class_tree", lambda s: ClassHierarchy(s).read_full_tree())

    async def read_class_children(self, name: str) -> ClassNode:
        """Read the subtree rooted at the named class."""
        return await self._run(
            "read_class_children",
            lambda s: ClassHierarchy(s).read_subtree_by_name(name),
            class_name=name,
        )

    async def update_class(self, node: ClassNode) -> int:
        """Replace a class and its subtree (destructive, see module docs).

        Returns:
            Id of the recreated class.
        """
        new_id = await self._run(
            "update_class",
            lambda s: ClassHierarchy(s).update_node(node),
            class_id=node.id,
        )
        logger.info(
            "Class replaced",
            old_class_id=node.id,
            class_id=new_id,
            request_id=self.request_id,
        )
        return new_id

    async def delete_class(self, class_id: int) -> None:
        """Delete a class with its descendants and their products."""
        await self._run(
            "delete_class",
            lambda s: ClassHierarchy(s).delete_node(class_id),
            class_id=class_id,
        )
        logger.info("Class deleted", class_id=class_id, request_id=self.request_id)

    # ========================================================================
    # Products
    # ========================================================================

    async def create_products(self, products: list[Product]) -> list[int]:
        """Create products under leaf classes, all or nothing.

        Returns:
            Product ids in submission order.
        """

        async def fn(session: AsyncSession) -> list[int]:
            catalog = ProductCatalog(session)
            return [await catalog.create_product(p) for p in products]

        ids = await self._run("create_products", fn, product_names=[p.name for p in products])
        logger.info("Products created", product_ids=ids, request_id=self.request_id)
        return ids

    async def read_product(self, product_id: int) -> Product:
        """Read a product with its values."""
        return await self._run(
            "read_product",
            lambda s: ProductCatalog(s).read_product(product_id),
            product_id=product_id,
        )

    async def read_class_products(self, class_id: int) -> list[Product]:
        """Read every product of a class."""
        return await self._run(
            "read_class_products",
            lambda s: ProductCatalog(s).read_class_products(class_id),
            class_id=class_id,
        )

    async def update_product(self, product: Product) -> int:
        """Replace a product (destructive, see module docs).

        Returns:
            Id of the recreated product.
        """
        new_id = await self._run(
            "update_product",
            lambda s: ProductCatalog(s).update_product(product),
            product_id=product.id,
        )
        logger.info(
            "Product replaced",
            old_product_id=product.id,
            product_id=new_id,
            request_id=self.request_id,
        )
        return new_id

    async def delete_product(self, product_id: int) -> None:
        """Delete a product and its values."""
        await self._run(
            "delete_product",
            lambda s: ProductCatalog(s).delete_product(product_id),
            product_id=product_id,
        )
        logger.info("Product deleted", product_id=product_id, request_id=self.request_id)


# ============================================================================
# Service Factory
# ============================================================================


def get_taxonomy_service(
    database: Database | None = None,
    request_id: str | None = None,
) -> TaxonomyService:
    """Get taxonomy service instance.

    Args:
        database: Storage to use; defaults to the one built from settings.
        request_id: Request ID for correlation.

    Returns:
        TaxonomyService instance.
    """
    if database is None:
        from classtree.infrastructure.database import database as default_database

        database = default_database
    return TaxonomyService(database, request_id=request_id)
