"""
Test the web design flow end-to-end.
Covers: generate → field map → rerandomize → export, through the service
layer and through the FastAPI app.
"""

import io
import json

import openpyxl
import pytest
from fastapi.testclient import TestClient

from backend.main import app
from backend.services import design_service, export_service
from backend.sessions import create_session, get_session, cleanup_expired_sessions, delete_session
from core.design_validator import DesignValidationError
from core.exporter import FieldBookExporter


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


class TestDesignService:
    """Service-level generation and re-randomization"""

    def test_generate_ibd_payload(self):
        designer, payload = design_service.generate_ibd(6, 2, 3, locations=1, seed=42, start_plot=101)
        assert designer.result is not None
        assert len(payload["field_book"]) == 18
        assert payload["blocks_per_replicate"] == 3
        assert payload["total_units"] == 18
        assert payload["seed"] == 42
        assert 0 < payload["a_efficiency"] <= 1
        assert 0 < payload["d_efficiency"] <= 1
        assert payload["converged"] is True
        assert payload["degenerate"] is False
        json.dumps(payload)

    def test_generate_ibd_invalid(self):
        with pytest.raises(DesignValidationError):
            design_service.generate_ibd(10, 3, 2)

    def test_rerandomize_records(self):
        _, payload = design_service.generate_ibd(6, 2, 3, seed=42)
        relabeled = design_service.rerandomize(payload["field_book"], 6, seed=7)
        assert len(relabeled) == 18
        for old, new in zip(payload["field_book"], relabeled):
            assert (old["plot"], old["rep"], old["iblock"]) == (new["plot"], new["rep"], new["iblock"])
        assert [r["entry"] for r in relabeled] != [r["entry"] for r in payload["field_book"]]

    def test_rerandomize_records_wrong_treatment_count(self):
        _, payload = design_service.generate_ibd(12, 3, 2, seed=5)
        with pytest.raises(DesignValidationError):
            design_service.rerandomize(payload["field_book"], 6, seed=3)
        with pytest.raises(DesignValidationError):
            design_service.rerandomize(payload["field_book"], 24, seed=3)

    def test_rerandomize_designer(self):
        designer, _ = design_service.generate_ibd(6, 2, 3, seed=42)
        result = design_service.rerandomize_designer(designer, seed=7)
        assert result["mapping"] == {1: 5, 2: 2, 3: 3, 4: 4, 5: 6, 6: 1}
        assert len(result["field_book"]) == 18

    def test_validate_design_params(self):
        valid, errors, warnings = design_service.validate_design_params(6, 2, 3, 1)
        assert valid is True
        assert errors == []
        assert warnings == []

        valid, errors, _ = design_service.validate_design_params(7, 2, 3, 1)
        assert valid is False
        assert len(errors) == 1


class TestExportService:
    """In-memory export"""

    def test_csv_bytes(self):
        designer, _ = design_service.generate_ibd(6, 2, 3, seed=42)
        exporter = FieldBookExporter()
        exporter.set_result(designer.result)
        text = export_service.generate_csv_bytes(exporter).decode("utf-8")
        lines = text.strip().splitlines()
        assert lines[0] == "ID,Location,Plot,Rep,IBlock,Entry,Treatment"
        assert len(lines) == 19

    def test_excel_bytes(self):
        designer, _ = design_service.generate_ibd(12, 3, 2, locations=2, seed=5)
        exporter = FieldBookExporter()
        exporter.set_result(designer.result)
        wb = openpyxl.load_workbook(io.BytesIO(export_service.generate_excel_bytes(exporter)))
        assert wb.sheetnames == ["Field Book", "Field Map", "Summary"]
        ws = wb["Field Book"]
        assert ws.cell(row=1, column=1).value == "ID"
        assert ws.cell(row=1, column=1).font.bold
        assert ws.max_row == 49  # header + 48 plots


class TestSessions:
    """In-memory session store"""

    def test_create_and_get(self):
        session_id = create_session("Wheat 2026")
        session = get_session(session_id)
        assert session["project_name"] == "Wheat 2026"
        assert session["designer"] is None
        delete_session(session_id)
        assert get_session(session_id) is None

    def test_cleanup_expired(self):
        session_id = create_session()
        assert cleanup_expired_sessions(max_age_seconds=-1) >= 1
        assert get_session(session_id) is None


class TestDesignApi:
    """FastAPI routes"""

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_config_defaults(self, client):
        response = client.get("/api/config/defaults")
        assert response.status_code == 200
        assert response.json()["limits"]["min_treatments"] == 2

    def test_full_flow(self, client):
        response = client.post("/api/design/generate", json={
            "treatments": 6, "block_size": 2, "replications": 3,
            "locations": 1, "seed": 42, "start_plot": 101,
        })
        assert response.status_code == 200
        session_id = response.headers["X-Session-ID"]
        headers = {"X-Session-ID": session_id}
        data = response.json()
        assert len(data["field_book"]) == 18
        assert data["blocks_per_replicate"] == 3

        summary = client.get("/api/design/summary", headers=headers).json()
        assert summary["total_units"] == 18
        assert summary["seed"] == 42

        field_map = client.get("/api/design/field-map", headers=headers).json()
        assert len(field_map["locations"][0]["replicates"]) == 3

        response = client.post("/api/design/rerandomize", json={"seed": 7}, headers=headers)
        assert response.status_code == 200
        relabeled = response.json()["field_book"]
        assert [r["plot"] for r in relabeled] == [r["plot"] for r in data["field_book"]]
        assert [r["entry"] for r in relabeled] != [r["entry"] for r in data["field_book"]]

        book = client.get("/api/design/field-book", headers=headers).json()["field_book"]
        assert book == relabeled

        response = client.post("/api/design/export/csv", headers=headers)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "_IBD_" in response.headers["content-disposition"]
        lines = response.text.strip().splitlines()
        assert lines[0] == "ID,Location,Plot,Rep,IBlock,Entry,Treatment"
        assert len(lines) == 19

        response = client.post("/api/design/export/excel", headers=headers)
        assert response.status_code == 200
        wb = openpyxl.load_workbook(io.BytesIO(response.content))
        assert "Field Map" in wb.sheetnames

    def test_generate_invalid_parameters(self, client):
        response = client.post("/api/design/generate", json={
            "treatments": 10, "block_size": 3, "replications": 2,
        })
        assert response.status_code == 400
        assert "does not divide" in response.json()["detail"]

    def test_rerandomize_without_design(self, client):
        response = client.post("/api/design/rerandomize", json={})
        assert response.status_code == 400

    def test_validate_endpoint(self, client):
        response = client.post("/api/design/validate", json={
            "treatments": 12, "block_size": 5, "replications": 2,
        })
        assert response.status_code == 200
        assert response.json()["valid"] is False

    def test_project_info(self, client):
        response = client.post("/api/project/new", json={"name": "Maize Trial"})
        headers = {"X-Session-ID": response.json()["session_id"]}
        info = client.get("/api/project/info", headers=headers).json()
        assert info["name"] == "Maize Trial"
        assert info["has_design"] is False
