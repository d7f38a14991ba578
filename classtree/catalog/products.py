"""Product catalog.

Products hang off leaf classes only, and every value a product holds is
bound to the class param that declared the attribute somewhere on the
class's ancestor chain.
"""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from classtree.catalog.base import Repository, require_name
from classtree.catalog.hierarchy import ClassHierarchy
from classtree.catalog.registry import param_to_entity
from classtree.domain.entities import ParamValue, Product
from classtree.domain.exceptions import (
    ConflictError,
    InvalidPlacementError,
    NotFoundError,
    ValidationError,
)
from classtree.infrastructure.models import (
    ClassParamModel,
    ProductModel,
    ProductParamValueModel,
)


class ProductCatalog(Repository):
    """Repository for products and their param values."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.hierarchy = ClassHierarchy(session)

    async def create_product(self, product: Product) -> int:
        """Insert a product under a leaf class together with its values.

        Args:
            product: Product to insert. Only parent_class.name is used to
                locate the class; values reference params by name.

        Returns:
            Id of the inserted product.

        Raises:
            NotFoundError: If the class does not exist or a value names a
                param outside the class's attribute closure.
            InvalidPlacementError: If the class has children.
            ConflictError: If the product name exists or a param is given twice.
        """
        require_name("product name", product.name)
        if product.parent_class is None:
            raise ValidationError("parent class", f"product '{product.name}' has no parent class")

        parent = await self.hierarchy.read_subtree_by_name(product.parent_class.name)
        if not parent.is_leaf:
            raise InvalidPlacementError(parent.name, len(parent.children))

        model = ProductModel(name=product.name, class_id=parent.id)
        self.session.add(model)
        await self._flush("Product", product.name)

        await self._store_values(model.id, product.name, parent.id, product.values)
        return model.id

    async def _store_values(
        self,
        product_id: int,
        product_name: str,
        class_id: int,
        values: list[ParamValue],
    ) -> None:
        # Later (closer to the class) declarations override ancestor ones
        closure = {param.name: param for param in await self.hierarchy.attribute_closure(class_id)}

        seen: set[str] = set()
        for item in values:
            name = item.param.name
            if name in seen:
                raise ConflictError(
                    "ProductParamValue",
                    f"{product_name}.{name}",
                    reason="is given more than once",
                )
            seen.add(name)

            param = closure.get(name)
            if param is None:
                raise NotFoundError("InheritedParam", name)

            result = await self.session.execute(
                select(ClassParamModel.id).where(
                    ClassParamModel.class_id == param.declared_by,
                    ClassParamModel.param_id == param.id,
                )
            )
            class_param_id = result.scalar_one()
            self.session.add(
                ProductParamValueModel(
                    product_id=product_id,
                    class_param_id=class_param_id,
                    value=str(item.value),
                )
            )
        await self._flush("ProductParamValue", product_name)

    async def read_product(self, product_id: int) -> Product:
        """Read a product with its class and values.

        The class is read without inherited params; each value carries the
        param that declared it.

        Raises:
            NotFoundError: If the product does not exist.
        """
        model = await self._get(product_id)
        parent = await self.hierarchy.read_node(model.class_id)

        result = await self.session.execute(
            select(ProductParamValueModel)
            .where(ProductParamValueModel.product_id == product_id)
            .order_by(ProductParamValueModel.class_param_id)
            .execution_options(populate_existing=True)
        )
        values = [
            ParamValue(
                param=param_to_entity(v.class_param.param, declared_by=v.class_param.class_id),
                value=v.value,
            )
            for v in result.scalars().all()
        ]
        return Product(id=model.id, name=model.name, parent_class=parent, values=values)

    async def read_class_products(self, class_id: int) -> list[Product]:
        """Read every product attached to a class.

        Raises:
            NotFoundError: If the class does not exist.
        """
        product_ids = await self.hierarchy.list_class_products(class_id)
        return [await self.read_product(product_id) for product_id in product_ids]

    async def update_product(self, product: Product) -> int:
        """Replace a product.

        Deletes the stored product and its values, then inserts the
        submitted one. Values missing from the submission are gone.

        Returns:
            Id of the recreated product.
        """
        if product.id is None:
            raise ValidationError("product id", "required for update")
        await self.delete_product(product.id)
        return await self.create_product(product)

    async def delete_product(self, product_id: int) -> None:
        """Delete a product; its values go with it.

        Raises:
            NotFoundError: If the product does not exist.
        """
        await self._get(product_id)
        await self.session.execute(
            delete(ProductModel)
            .where(ProductModel.id == product_id)
            .execution_options(synchronize_session=False)
        )
        self.session.expunge_all()

    async def _get(self, product_id: int) -> ProductModel:
        result = await self.session.execute(
            select(ProductModel).where(ProductModel.id == product_id)
        )
        model = result.scalar_one_or_none()
        if model is None:
            raise NotFoundError("Product", product_id)
        return model
