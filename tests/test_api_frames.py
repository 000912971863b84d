"""
HTTP tests for the frame ingestion endpoints.
"""

import pytest
from sqlalchemy.exc import OperationalError

from pressuretrace import __version__
from pressuretrace.core.config import settings
from pressuretrace.main import create_app
from pressuretrace.models.alert import PressureAlert
from pressuretrace.models.frame import PressureFrame


@pytest.mark.integration
def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__}


@pytest.mark.unit
def test_create_app_mounts_routes_under_prefix():
    paths = {route.path for route in create_app().routes}

    assert "/health" in paths
    assert f"{settings.api_prefix}/patients/{{patient_id}}/frames" in paths
    assert f"{settings.api_prefix}/patients/{{patient_id}}/uploads" in paths
    assert f"{settings.api_prefix}/frames/{{frame_id}}/raw" in paths


@pytest.mark.integration
def test_upload_critical_frame(client, db, frame_text):
    response = client.post("/api/patients/p-42/frames", json={"raw_text": frame_text(80)})

    assert response.status_code == 200
    body = response.json()
    assert body["patient_id"] == "p-42"
    assert body["peak_pressure_index"] == 80.0
    assert body["contact_area_percent"] == 18.75
    assert body["risk_level"] == "Critical"
    assert body["is_flagged_for_review"] is True

    alert = db.query(PressureAlert).one()
    assert body["alert_id"] == alert.id


@pytest.mark.integration
def test_upload_frame_with_timestamp(client, frame_text):
    response = client.post(
        "/api/patients/p-42/frames",
        json={"raw_text": frame_text(20), "timestamp": "2024-01-15T14:00:00+02:00"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["timestamp"] == "2024-01-15T12:00:00"
    assert body["risk_level"] == "Low"
    assert body["alert_id"] is None


@pytest.mark.integration
def test_upload_malformed_frame(client):
    response = client.post("/api/patients/p-42/frames", json={"raw_text": "1,2\n3,4"})

    assert response.status_code == 422
    assert response.json()["detail"] == "Frame data must represent a 4x4 matrix."


@pytest.mark.integration
def test_batch_upload(client, frame_text):
    content = "\n\n".join([frame_text(10), frame_text(65), "1,2\n3,4,5,6\n7,8,9,10\n11,12,13,14"])

    response = client.post(
        "/api/patients/p-42/uploads",
        json={"file_name": "frame_20240115120000.csv", "content": content},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["file_name"] == "frame_20240115120000.csv"
    assert body["frames_processed"] == 2
    assert body["alerts_raised"] == 1
    assert body["status"] == "CompletedWithErrors"
    assert body["errors"] == ["Frame 3: Frame data must represent a 4x4 matrix."]


@pytest.mark.integration
@pytest.mark.parametrize(
    ("content", "detail"),
    [
        ("", "File was empty."),
        ("1,2,3,4\n\n5,6,7,8", "Unable to detect any 4x4 frames in the file."),
    ],
)
def test_batch_upload_rejected(client, content, detail):
    response = client.post("/api/patients/p-42/uploads", json={"file_name": "frame.csv", "content": content})

    assert response.status_code == 400
    assert response.json()["detail"] == detail


@pytest.mark.integration
def test_raw_frame_retrieval(client, frame_text):
    text = frame_text(70)
    created = client.post("/api/patients/p-9/frames", json={"raw_text": text}).json()

    response = client.get(f"/api/frames/{created['id']}/raw")

    assert response.status_code == 200
    body = response.json()
    assert body["raw_text"] == text
    assert body["risk_level"] == "High"
    assert body["alert_id"] == created["alert_id"]


@pytest.mark.integration
def test_raw_frame_not_found(client):
    response = client.get("/api/frames/does-not-exist/raw")

    assert response.status_code == 404
    assert response.json()["detail"] == "Frame not found."


@pytest.mark.integration
def test_storage_failure_is_service_unavailable(client, db, frame_text, monkeypatch):
    def failing_commit():
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    monkeypatch.setattr(db, "commit", failing_commit)

    response = client.post("/api/patients/p-42/frames", json={"raw_text": frame_text(80)})

    assert response.status_code == 503
    assert response.json()["detail"] == "Failed to persist frame."
    assert db.query(PressureFrame).count() == 0
    assert db.query(PressureAlert).count() == 0
