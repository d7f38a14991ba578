"""Shared fixtures for taxonomy tests.

Engine tests run against an in-memory SQLite database. StaticPool keeps a
single connection so every session sees the same database.
"""

from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.pool import StaticPool

from classtree.application.taxonomy_service import TaxonomyService
from classtree.catalog import UnitRegistry, ValueTypeRegistry
from classtree.domain.entities import ClassNode, OrganizationalUnit, Param
from classtree.infrastructure.database import Database

VALUE_TYPES = ["string", "int", "float"]


@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
    """Create an empty in-memory database with the taxonomy schema."""
    db = Database("sqlite+aiosqlite://", poolclass=StaticPool)
    await db.create_schema()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    """Open a session with units and value types already registered."""
    async with database.session_factory() as session:
        await UnitRegistry(session).ensure("U1", "u1")
        for name in VALUE_TYPES:
            await ValueTypeRegistry(session).ensure(name)
        yield session


@pytest.fixture
def unit() -> OrganizationalUnit:
    """Unit every example class belongs to."""
    return OrganizationalUnit(name="U1")


@pytest.fixture
def vehicle_tree(unit: OrganizationalUnit) -> ClassNode:
    """Example taxonomy.

    Vehicle [color]
        Car [doors]
            Tesla [range_km]
            Sedan
        Truck [payload]
    """
    return ClassNode(
        name="Vehicle",
        unit=unit,
        params=[Param(name="color", value_type="string", unit=unit)],
        children=[
            ClassNode(
                name="Car",
                unit=unit,
                params=[Param(name="doors", value_type="int", unit=unit)],
                children=[
                    ClassNode(
                        name="Tesla",
                        unit=unit,
                        params=[Param(name="range_km", value_type="int", unit=unit)],
                    ),
                    ClassNode(name="Sedan", unit=unit),
                ],
            ),
            ClassNode(
                name="Truck",
                unit=unit,
                params=[Param(name="payload", value_type="float")],
            ),
        ],
    )


@pytest.fixture
async def service(database: Database) -> TaxonomyService:
    """Service with units and value types registered."""
    service = TaxonomyService(database, request_id="req_test")
    await service.ensure_units([OrganizationalUnit(name="U1", short_name="u1")])
    await service.ensure_value_types(VALUE_TYPES)
    return service


@pytest.fixture
async def seeded_service(service: TaxonomyService, vehicle_tree: ClassNode) -> TaxonomyService:
    """Service with the example taxonomy stored."""
    await service.create_classes([vehicle_tree])
    return service
