"""Registry API endpoints.

Provides endpoints for the flat name-keyed registries:
- POST /units - get or create organizational units
- GET /units - list units
- DELETE /units/{name} - delete a unit (its classes go with it)
- POST /value-types - get or create value types
- GET /value-types - list value types
- DELETE /value-types/{name} - delete a value type and its params
- GET /params - list params
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status

from classtree.api.converters import (
    param_to_schema,
    unit_from_schema,
    unit_to_schema,
    value_type_to_schema,
)
from classtree.api.schemas import (
    ErrorResponse,
    IdsResponse,
    ParamsResponse,
    UnitsRequest,
    UnitsResponse,
    ValueTypesRequest,
    ValueTypesResponse,
)
from classtree.application.taxonomy_service import TaxonomyService, get_taxonomy_service

router = APIRouter(tags=["Registries"])


# ============================================================================
# Dependencies
# ============================================================================


def get_service(request: Request) -> TaxonomyService:
    """Get taxonomy service with request ID."""
    request_id = getattr(request.state, "request_id", None)
    return get_taxonomy_service(request.app.state.database, request_id=request_id)


# ============================================================================
# Organizational Units
# ============================================================================


@router.post(
    "/units",
    response_model=IdsResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Ensure organizational units",
)
async def ensure_units(
    body: UnitsRequest,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> IdsResponse:
    """Get or create units by name.

    Existing units keep their stored short name.
    """
    ids = await service.ensure_units([unit_from_schema(u) for u in body.units])
    return IdsResponse(ids=ids)


@router.get("/units", response_model=UnitsResponse, summary="List organizational units")
async def list_units(
    service: Annotated[TaxonomyService, Depends(get_service)],
    name: Annotated[str | None, Query(description="Exact unit name")] = None,
) -> UnitsResponse:
    """List units, optionally filtered by name."""
    units = await service.list_units(name)
    return UnitsResponse(units=[unit_to_schema(u) for u in units])


@router.delete(
    "/units/{name}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
    summary="Delete organizational unit",
)
async def delete_unit(
    name: str,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> None:
    """Delete a unit.

    Classes owned by the unit are deleted with their subtrees and
    products; params owned by it are kept without an owner.
    """
    await service.delete_unit(name)


# ============================================================================
# Value Types
# ============================================================================


@router.post(
    "/value-types",
    response_model=IdsResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Ensure value types",
)
async def ensure_value_types(
    body: ValueTypesRequest,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> IdsResponse:
    """Get or create value types by name."""
    ids = await service.ensure_value_types(body.names)
    return IdsResponse(ids=ids)


@router.get("/value-types", response_model=ValueTypesResponse, summary="List value types")
async def list_value_types(
    service: Annotated[TaxonomyService, Depends(get_service)],
    name: Annotated[str | None, Query(description="Exact value type name")] = None,
) -> ValueTypesResponse:
    """List value types, optionally filtered by name."""
    value_types = await service.list_value_types(name)
    return ValueTypesResponse(value_types=[value_type_to_schema(v) for v in value_types])


@router.delete(
    "/value-types/{name}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
    summary="Delete value type",
)
async def delete_value_type(
    name: str,
    service: Annotated[TaxonomyService, Depends(get_service)],
) -> None:
    """Delete a value type together with every param of that type."""
    await service.delete_value_type(name)


# ============================================================================
# Params
# ============================================================================


@router.get("/params", response_model=ParamsResponse, summary="List params")
async def list_params(
    service: Annotated[TaxonomyService, Depends(get_service)],
    name: Annotated[str | None, Query(description="Exact param name")] = None,
) -> ParamsResponse:
    """List params, optionally filtered by name."""
    params = await service.list_params(name)
    return ParamsResponse(params=[param_to_schema(p) for p in params])
