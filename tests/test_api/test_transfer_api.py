"""
Tests for the import/export API
"""
import json

import pytest
from fastapi.testclient import TestClient

from invoice_processor.api.deps import get_services
from invoice_processor.main import create_app


@pytest.fixture
def client(settings, services):
    app = create_app(settings)
    app.dependency_overrides[get_services] = lambda: services
    return TestClient(app)


class TestImportApi:

    def test_import_spreadsheet(self, client, sample_workbook):
        response = client.post("/api/import", json={"file_path": str(sample_workbook)})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["invoices"] == 2
        assert body["data"]["items"] == 3

    def test_file_path_is_required(self, client):
        assert client.post("/api/import", json={}).status_code == 422

    def test_unsupported_file(self, client, tmp_path):
        response = client.post("/api/import", json={"file_path": str(tmp_path / "data.pdf")})

        assert response.status_code == 400
        assert "Unsupported" in response.json()["detail"]

    def test_missing_file(self, client, tmp_path):
        response = client.post("/api/import", json={"file_path": str(tmp_path / "nope.xlsx")})

        assert response.status_code == 400


class TestExportApi:

    def test_json_export(self, client, sample_workbook):
        client.post("/api/import", json={"file_path": str(sample_workbook)})

        response = client.get("/api/export", params={"format": "json"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert "invoices.json" in response.headers["content-disposition"]
        assert len(json.loads(response.text)) == 2

    def test_xml_export(self, client):
        response = client.get("/api/export", params={"format": "xml"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/xml")
        assert "<invoices" in response.text

    def test_unknown_format(self, client):
        assert client.get("/api/export", params={"format": "yaml"}).status_code == 400
