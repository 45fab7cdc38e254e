# exam_core/examinations/tests/test_sessions_api.py
import pytest

from exam_core.examinations.models import SessionStatus
from exam_core.medical_records.services import MedicalRecordInput, MedicalRecordService

pytestmark = pytest.mark.django_db


def test_create_session_endpoint(api_client, patient):
    r = api_client.post(
        "/api/session/create",
        {"patientName": "Nguyen Van A", "patientId": patient.id, "patientInfo": {"age": 45}},
        format="json",
    )

    assert r.status_code == 200, r.data
    assert r.data["success"] is True
    assert r.data["data"]["id"].startswith("sess_")
    assert r.data["data"]["status"] == "active"
    assert r.data["data"]["patientInfo"] == {"age": 45}


def test_create_session_requires_patient_name(api_client):
    r = api_client.post("/api/session/create", {"patientInfo": {}}, format="json")

    assert r.status_code == 400, r.data
    assert r.data["success"] is False
    assert r.data["message"] == "Patient name is required."


def test_get_session_with_and_without_record(api_client, session):
    r = api_client.get(f"/api/session/{session.id}")
    assert r.status_code == 200, r.data
    assert r.data["data"]["session"]["id"] == session.id
    assert r.data["data"]["medicalRecord"] is None

    MedicalRecordService.save_medical_record(
        MedicalRecordInput(session_id=session.id, assessment="Viêm dạ dày", icd_codes=["K29.7"])
    )

    r = api_client.get(f"/api/session/{session.id}")
    assert r.data["data"]["medicalRecord"]["icdCodes"] == ["K29.7"]


def test_get_unknown_session_is_404_envelope(api_client):
    r = api_client.get("/api/session/sess_missing")

    assert r.status_code == 404, r.data
    assert r.data["success"] is False
    assert r.data["error"] == "Session not found"
    assert r.data["code"] == "not_found"
    assert r["X-Request-Id"] == r.data["request_id"]


def test_get_session_without_id_is_400(api_client):
    r = api_client.get("/api/session/")

    assert r.status_code == 400, r.data
    assert r.data["error"] == "Session ID is required"


def test_cancel_endpoint(api_client, session):
    r = api_client.post(f"/api/session/{session.id}/cancel")
    assert r.status_code == 200, r.data
    assert r.data["data"]["status"] == SessionStatus.CANCELLED

    again = api_client.post(f"/api/session/{session.id}/cancel")
    assert again.status_code == 409, again.data
    assert again.data["code"] == "conflict"

    missing = api_client.post("/api/session/sess_missing/cancel")
    assert missing.status_code == 404, missing.data


def test_list_sessions_filters_by_patient_and_status(api_client, session, his_session):
    r = api_client.get("/api/sessions/", {"patient": session.patient_id})
    assert r.status_code == 200, r.data
    assert r.data["count"] == 1
    assert r.data["results"][0]["id"] == session.id

    r = api_client.get("/api/sessions/", {"status": "active"})
    assert r.data["count"] == 2
