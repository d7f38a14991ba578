"""Shared fixtures for API tests."""

from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from classtree.infrastructure.database import Database
from classtree.main import app


def vehicle_payload() -> dict[str, Any]:
    """Example taxonomy as submitted over HTTP."""
    unit = {"name": "U1"}
    return {
        "classes": [
            {
                "name": "Vehicle",
                "unit": unit,
                "params": [{"name": "color", "value_type": "string"}],
                "children": [
                    {
                        "name": "Car",
                        "unit": unit,
                        "params": [{"name": "doors", "value_type": "int"}],
                        "children": [
                            {
                                "name": "Tesla",
                                "unit": unit,
                                "params": [{"name": "range_km", "value_type": "int"}],
                            },
                            {"name": "Sedan", "unit": unit},
                        ],
                    },
                    {
                        "name": "Truck",
                        "unit": unit,
                        "params": [{"name": "payload", "value_type": "float"}],
                    },
                ],
            }
        ]
    }


@pytest.fixture
def vehicle_body() -> dict[str, Any]:
    """Request body creating the example taxonomy."""
    return vehicle_payload()


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create test client backed by an empty in-memory database."""
    default_database = app.state.database
    app.state.database = Database("sqlite+aiosqlite://", poolclass=StaticPool)
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.state.database = default_database


@pytest.fixture
def registered_client(client: TestClient) -> TestClient:
    """Client with units and value types registered."""
    response = client.post("/units", json={"units": [{"name": "U1", "short_name": "u1"}]})
    assert response.status_code == 200
    response = client.post("/value-types", json={"names": ["string", "int", "float"]})
    assert response.status_code == 200
    return client


@pytest.fixture
def seeded_client(registered_client: TestClient) -> TestClient:
    """Client with the example taxonomy stored."""
    response = registered_client.post("/classes", json=vehicle_payload())
    assert response.status_code == 201
    return registered_client
