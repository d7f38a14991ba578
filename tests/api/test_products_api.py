"""Tests for product API endpoints."""

from fastapi.testclient import TestClient


def create_product(client: TestClient, product: dict) -> int:
    """Create one product and return its id."""
    response = client.post("/products", json={"products": [product]})
    assert response.status_code == 201, response.json()
    [product_id] = response.json()["ids"]
    return product_id


class TestCreateProducts:
    """Tests for POST /products."""

    def test_round_trip(self, seeded_client: TestClient) -> None:
        """Products read back with inherited values stored as text."""
        product_id = create_product(
            seeded_client,
            {
                "name": "Model S",
                "parent_class": "Tesla",
                "values": [
                    {"param": "color", "value": "red"},
                    {"param": "doors", "value": 4},
                    {"param": "range_km", "value": "600"},
                ],
            },
        )

        response = seeded_client.get(f"/products/{product_id}")
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Model S"
        assert data["parent_class"]["name"] == "Tesla"
        values = {v["param"]: (v["value"], v["value_type"]) for v in data["values"]}
        assert values == {
            "color": ("red", "string"),
            "doors": ("4", "int"),
            "range_km": ("600", "int"),
        }

    def test_non_leaf_class(self, seeded_client: TestClient) -> None:
        """Products on a class with children are rejected with 422."""
        response = seeded_client.post(
            "/products",
            json={"products": [{"name": "Generic", "parent_class": "Car"}]},
        )
        assert response.status_code == 422
        data = response.json()
        assert data["error_code"] == "INVALID_PLACEMENT"
        assert data["details"]["class_name"] == "Car"

    def test_oversized_value(self, seeded_client: TestClient) -> None:
        """Values longer than the stored column are rejected before any write."""
        response = seeded_client.post(
            "/products",
            json={
                "products": [
                    {
                        "name": "Model S",
                        "parent_class": "Tesla",
                        "values": [{"param": "color", "value": "r" * 301}],
                    }
                ]
            },
        )
        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert data["details"][0]["loc"][-1] == "value"

        tesla_id = seeded_client.get("/classes/subtree", params={"name": "Tesla"}).json()["id"]
        response = seeded_client.get(f"/classes/{tesla_id}/products")
        assert response.json()["products"] == []

    def test_param_not_inherited(self, seeded_client: TestClient) -> None:
        """Values for params outside the closure return 404."""
        response = seeded_client.post(
            "/products",
            json={
                "products": [
                    {
                        "name": "Model S",
                        "parent_class": "Tesla",
                        "values": [{"param": "payload", "value": 1.5}],
                    }
                ]
            },
        )
        assert response.status_code == 404

    def test_failed_batch_stores_nothing(self, seeded_client: TestClient) -> None:
        """An invalid second product rolls back the first one."""
        response = seeded_client.post(
            "/products",
            json={
                "products": [
                    {"name": "Model S", "parent_class": "Tesla"},
                    {"name": "Dinghy", "parent_class": "Boat"},
                ]
            },
        )
        assert response.status_code == 404

        tesla_id = seeded_client.get("/classes/subtree", params={"name": "Tesla"}).json()["id"]
        response = seeded_client.get(f"/classes/{tesla_id}/products")
        assert response.json()["products"] == []


class TestReadUpdateDeleteProducts:
    """Tests for product reads, replace and delete."""

    def test_read_unknown(self, seeded_client: TestClient) -> None:
        """Unknown product ids return 404."""
        response = seeded_client.get("/products/999")
        assert response.status_code == 404

    def test_replace(self, seeded_client: TestClient) -> None:
        """PUT replaces the product and drops omitted values."""
        product_id = create_product(
            seeded_client,
            {
                "name": "Model S",
                "parent_class": "Tesla",
                "values": [{"param": "color", "value": "red"}, {"param": "doors", "value": 4}],
            },
        )

        response = seeded_client.put(
            f"/products/{product_id}",
            json={
                "name": "Model S",
                "parent_class": "Tesla",
                "values": [{"param": "color", "value": "blue"}],
            },
        )
        assert response.status_code == 200
        new_id = response.json()["id"]

        data = seeded_client.get(f"/products/{new_id}").json()
        assert [(v["param"], v["value"]) for v in data["values"]] == [("color", "blue")]
        assert seeded_client.get(f"/products/{product_id}").status_code == 404

    def test_delete(self, seeded_client: TestClient) -> None:
        """DELETE removes the product."""
        product_id = create_product(seeded_client, {"name": "Civic", "parent_class": "Sedan"})

        response = seeded_client.delete(f"/products/{product_id}")
        assert response.status_code == 204
        assert seeded_client.get(f"/products/{product_id}").status_code == 404
