"""Class API endpoints.

Provides endpoints for the class tree:
- POST /classes - create class subtrees
- GET /classes/tree - whole class forest
- GET /classes/subtree - subtree rooted at a named class
- GET /classes/{id} - one class with own or inherited params
- PUT /classes/{id} - replace a class and its subtree
- DELETE /classes/{id} - delete a class with its subtree
- GET /classes/{id}/products - products of a class
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status

from classtree.api.converters import (
    class_from_schema,
    class_to_schema,
    product_to_response,
)
from classtree.api.schemas import (
    ClassesRequest,
    ClassSchema,
    ClassTreeResponse,
    ErrorResponse,
    IdResponse,
    IdsResponse,
    ProductsResponse,
)
from classtree.application.taxonomy_service import TaxonomyService, get_taxonomy_service

router = APIRouter(prefix="/classes", tags=["Classes"])


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
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Create class subtrees",
    description="Insert one or more class subtrees in a single transaction.",
)
async def create_classes(
    body: ClassesRequest,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> IdsResponse:
    """Create class subtrees.

    A top-level class is attached under parent_id when given; otherwise
    it becomes a new root. Params are created on first use.

    Returns:
        Ids of the submitted top-level classes.
    """
    ids = await service.create_classes([class_from_schema(c) for c in body.classes])
    return IdsResponse(ids=ids)


@router.get("/tree", response_model=ClassTreeResponse, summary="Read whole class tree")
async def read_class_tree(
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> ClassTreeResponse:
    """Read every class as a forest of id/name/parent nodes."""
    roots = await service.read_class_tree()
    return ClassTreeResponse(roots=[class_to_schema(r) for r in roots])


@router.get(
    "/subtree",
    response_model=ClassSchema,
    responses={404: {"model": ErrorResponse}},
    summary="Read class subtree by name",
)
async def read_class_children(
    service: Annotated[TaxonomyService, Depends(get_service)],
    name: Annotated[str, Query(description="Name of the subtree root")],
) -> ClassSchema:
    """Read the named class with all of its descendants."""
    node = await service.read_class_children(name)
    return class_to_schema(node)


@router.get(
    "/{class_id}",
    response_model=ClassSchema,
    responses={404: {"model": ErrorResponse}},
    summary="Read class",
)
async def read_class(
    class_id: int,
    service: Annotated[TaxonomyService, Depends(get_service)],
    all_params: Annotated[
        bool, Query(description="Return inherited params, root first")
    ] = False,
) -> ClassSchema:
    """Read one class with its unit and params."""
    node = await service.read_class(class_id, all_params)
    return class_to_schema(node)


@router.put(
    "/{class_id}",
    response_model=IdResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
    summary="Replace class",
    description=(
        "Destructive replace: the class, its descendants and their products "
        "are deleted and the submitted subtree is inserted in their place. "
        "The class gets a new id."
    ),
)
async def update_class(
    class_id: int,
    body: ClassSchema,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> IdResponse:
    """Replace a class and its subtree.

    Returns:
        Id of the recreated class.
    """
    new_id = await service.update_class(class_from_schema(body, class_id=class_id))
    return IdResponse(id=new_id)


@router.delete(
    "/{class_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
    summary="Delete class",
)
async def delete_class(
    class_id: int,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> None:
    """Delete a class with its descendants and their products."""
    await service.delete_class(class_id)


@router.get(
    "/{class_id}/products",
    response_model=ProductsResponse,
    responses={404: {"model": ErrorResponse}},
    summary="List products of a class",
)
async def read_class_products(
    class_id: int,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> ProductsResponse:
    """Read every product attached to a class."""
    products = await service.read_class_products(class_id)
    return ProductsResponse(products=[product_to_response(p) for p in products])
