"""Product API endpoints.

Provides endpoints for products attached to leaf classes:
- POST /products - create products
- GET /products/{id} - product with its values
- PUT /products/{id} - replace a product
- DELETE /products/{id} - delete a product
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from classtree.api.converters import product_from_schema, product_to_response
from classtree.api.schemas import (
    ErrorResponse,
    IdResponse,
    IdsResponse,
    ProductResponse,
    ProductSchema,
    ProductsRequest,
)
from classtree.application.taxonomy_service import TaxonomyService, get_taxonomy_service

router = APIRouter(prefix="/products", tags=["Products"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(request: Request) -> TaxonomyService:
    """Get taxonomy service with request ID."""
    request_id = getattr(request.state, "request_id", None)
    return get_taxonomy_service(request.app.state.database, request_id=request_id)


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "",
    response_model=IdsResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Create products",
    description=(
        "Insert products under leaf classes. Values may reference any param "
        "inherited by the class. The batch is all or nothing."
    ),
)
async def create_products(
    body: ProductsRequest,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> IdsResponse:
    """Create products.

    Returns:
        Product ids in submission order.
    """
    ids = await service.create_products([product_from_schema(p) for p in body.products])
    return IdsResponse(ids=ids)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Read product",
)
async def read_product(
    product_id: int,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> ProductResponse:
    """Read a product with its class and values."""
    product = await service.read_product(product_id)
    return product_to_response(product)


@router.put(
    "/{product_id}",
    response_model=IdResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
    summary="Replace product",
    description=(
        "Destructive replace: the product and its values are deleted and the "
        "submitted product is inserted. The product gets a new id."
    ),
)
async def update_product(
    product_id: int,
    body: ProductSchema,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> IdResponse:
    """Replace a product.

    Returns:
        Id of the recreated product.
    """
    new_id = await service.update_product(product_from_schema(body, product_id=product_id))
    return IdResponse(id=new_id)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
    summary="Delete product",
)
async def delete_product(
    product_id: int,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> None:
    """Delete a product and its values."""
    await service.delete_product(product_id)
