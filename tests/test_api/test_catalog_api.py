"""
Tests for the customers/products API, root and health endpoints
"""
import pytest
from fastapi.testclient import TestClient

from invoice_processor.api.deps import get_services
from invoice_processor.api.errors import http_error
from invoice_processor.core.exceptions import (
    ConflictError,
    InvoiceImportError,
    StorageError,
    UnavailableError,
)
from invoice_processor.main import create_app


@pytest.fixture
def client(settings, services):
    app = create_app(settings)
    app.dependency_overrides[get_services] = lambda: services
    return TestClient(app)


class TestCustomersApi:

    def test_create_then_get(self, client):
        created = client.post("/api/customers/", json={"name": "Acme Corp", "address": "1 Main St"})
        customer_id = created.json()["data"]["id"]

        response = client.get(f"/api/customers/{customer_id}")

        assert created.status_code == 201
        assert response.json()["data"] == {"id": customer_id, "name": "Acme Corp", "address": "1 Main St"}

    def test_list(self, client):
        for name in ("A", "B", "C"):
            client.post("/api/customers/", json={"name": name})

        body = client.get("/api/customers/", params={"per_page": 2}).json()

        assert body["count"] == 2
        assert [c["name"] for c in body["data"]] == ["A", "B"]

    def test_not_found(self, client):
        assert client.get("/api/customers/999").status_code == 404

    def test_name_is_required(self, client):
        assert client.post("/api/customers/", json={"address": "x"}).status_code == 422


class TestProductsApi:

    def test_create_then_get(self, client):
        created = client.post("/api/products/", json={"name": "Widget", "price": 10.5})
        product_id = created.json()["data"]["id"]

        response = client.get(f"/api/products/{product_id}")

        assert response.json()["data"]["price"] == 10.5

    def test_negative_price_is_rejected(self, client):
        assert client.post("/api/products/", json={"name": "Widget", "price": -1}).status_code == 422

    def test_not_found(self, client):
        assert client.get("/api/products/999").status_code == 404


class TestStatusEndpoints:

    def test_root(self, client):
        body = client.get("/").json()

        assert body["status"] == "online"
        assert body["message"] == "Invoice Processor API"

    def test_health(self, client):
        body = client.get("/health").json()

        assert body["status"] == "healthy"
        assert body["database"]["status"] == "connected"
        assert body["database"]["backend"] == "sql"


class TestErrorMapping:

    @pytest.mark.parametrize("error, status", [
        (InvoiceImportError("bad row"), 400),
        (ConflictError("duplicate"), 409),
        (UnavailableError("down"), 503),
        (StorageError("other"), 500),
    ])
    def test_status_codes(self, error, status):
        assert http_error(error, "testing").status_code == status
