"""
Tests for the invoices API

The app runs against the in-memory service graph through
dependency_overrides; the lifespan (real database) is not started.

Author: TM3
Date: 2025-11-22
"""
import pytest
from fastapi.testclient import TestClient

from invoice_processor.api.deps import get_services
from invoice_processor.main import create_app


@pytest.fixture
def client(settings, services, sample_rows):
    services.import_service.import_rows(sample_rows)
    app = create_app(settings)
    app.dependency_overrides[get_services] = lambda: services
    return TestClient(app)


class TestListInvoices:

    def test_envelope(self, client):
        response = client.get("/api/invoices/")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["page"] == 1
        assert body["per_page"] == 20
        assert body["count"] == 2
        assert body["data"][0]["item_count"] == 2

    def test_pagination(self, client):
        body = client.get("/api/invoices/", params={"page": 2, "per_page": 1}).json()

        assert body["count"] == 1
        assert body["data"][0]["id"] == 2

    def test_page_size_is_capped(self, client):
        body = client.get("/api/invoices/", params={"per_page": 5000}).json()

        assert body["per_page"] == 100

    def test_invalid_page(self, client):
        assert client.get("/api/invoices/", params={"page": 0}).status_code == 422


class TestShowInvoice:

    def test_details(self, client):
        response = client.get("/api/invoices/1")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["invoice"]["grand_total"] == 41.0
        assert data["customer"]["name"] == "Acme Corp"
        assert data["items"][1]["product_name"] == "Gadget"

    def test_not_found(self, client):
        response = client.get("/api/invoices/999")

        assert response.status_code == 404
        assert "999" in response.json()["detail"]


class TestWriteInvoices:

    def test_create_and_add_item(self, client):
        # Arrange
        created = client.post("/api/invoices/", json={
            "customer_id": 1, "date": "2024-01-01", "grand_total": 100,
        })
        invoice_id = created.json()["data"]["id"]

        # Act
        response = client.post(f"/api/invoices/{invoice_id}/items", json={
            "product_id": 1, "quantity": 3, "price": 2.0,
        })

        # Assert
        assert created.status_code == 201
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["grand_total"] == 106.0
        assert data["items"][0]["unit_price"] == 2.0

    def test_create_for_unknown_customer(self, client):
        response = client.post("/api/invoices/", json={"customer_id": 999, "date": "2024-01-01"})

        assert response.status_code == 404

    def test_add_item_to_unknown_invoice(self, client):
        response = client.post("/api/invoices/999/items", json={"product_id": 1, "quantity": 1})

        assert response.status_code == 404

    def test_negative_quantity_is_rejected(self, client):
        response = client.post("/api/invoices/1/items", json={"product_id": 1, "quantity": -1})

        assert response.status_code == 422
