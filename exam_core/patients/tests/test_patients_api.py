# exam_core/patients/tests/test_patients_api.py
import pytest

pytestmark = pytest.mark.django_db


def test_create_and_retrieve_patient(api_client):
    r = api_client.post(
        "/api/patients/",
        {"name": "Nguyen Van A", "birthDate": "1980-01-02", "phoneNumber": "0901234567"},
        format="json",
    )
    assert r.status_code == 201, r.data
    assert r.data["success"] is True
    pid = r.data["data"]["id"]
    assert r.data["data"]["displayId"].startswith("BN-")

    g = api_client.get(f"/api/patients/{pid}/")
    assert g.status_code == 200, g.data
    assert g.data["data"]["phoneNumber"] == "0901234567"

    d = api_client.get(f"/api/patients/display/{r.data['data']['displayId']}/")
    assert d.status_code == 200, d.data
    assert d.data["data"]["id"] == pid


def test_duplicate_returns_409_with_candidates_then_force_creates(api_client, patient):
    body = {"name": "Nguyen Van A2", "phoneNumber": patient.phone_number}

    r = api_client.post("/api/patients/", body, format="json")
    assert r.status_code == 409, r.data
    assert r.data["success"] is False
    assert r.data["error"] == "POSSIBLE_DUPLICATE"
    assert [d["id"] for d in r.data["duplicates"]] == [patient.id]

    f = api_client.post("/api/patients/force/", body, format="json")
    assert f.status_code == 201, f.data
    assert f.data["data"]["id"] != patient.id


def test_create_requires_name(api_client):
    r = api_client.post("/api/patients/", {"name": "   "}, format="json")

    assert r.status_code == 400, r.data
    assert r.data["success"] is False
    assert r.data["code"] == "validation_error"
    assert r.data["message"] == "Patient name is required."


def test_list_search_envelope(api_client, patient):
    r = api_client.get("/api/patients/", {"q": "Nguyen", "page": 1, "limit": 10})

    assert r.status_code == 200, r.data
    assert r.data["total"] == 1
    assert r.data["pages"] == 1
    assert r.data["page"] == 1
    assert r.data["limit"] == 10
    assert r.data["patients"][0]["displayId"] == patient.display_id
    assert r.data["patients"][0]["totalVisits"] == 0


def test_patch_updates_and_unknown_is_404(api_client, patient):
    p = api_client.patch(f"/api/patients/{patient.id}/", {"bloodType": "O+"}, format="json")
    assert p.status_code == 200, p.data
    assert p.data["data"]["bloodType"] == "O+"

    m = api_client.patch("/api/patients/pat_missing/", {"bloodType": "A"}, format="json")
    assert m.status_code == 404, m.data
    assert m.data["error"] == "Patient not found"

    e = api_client.get("/api/patients/pat_missing/")
    assert e.status_code == 404, e.data
