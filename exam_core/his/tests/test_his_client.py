# exam_core/his/tests/test_his_client.py
import requests

from exam_core.conftest import HIS_BASE
from exam_core.his.client import HISClient, MedicalPayload, get_his_client

CURRENT_URL = f"{HIS_BASE}/sessions/current"


def test_current_session_unwraps_envelope(his_mock):
    his_mock.get(CURRENT_URL, json={"success": True, "data": {"visitId": "V-1"}})

    resp = get_his_client().get_current_session()

    assert resp.success is True
    assert resp.data == {"visitId": "V-1"}
    assert his_mock.last_request.headers["Authorization"] == "Bearer test-key"


def test_current_session_empty_is_failure(his_mock):
    his_mock.get(CURRENT_URL, json={"success": True, "data": None})

    resp = get_his_client().get_current_session()

    assert resp.success is False
    assert resp.error == "HIS has no current session"


def test_not_configured_makes_no_request(his_mock):
    client = HISClient(base_url="", api_key="")

    resp = client.update_visit("V-1", MedicalPayload(assessment="A"))

    assert resp.success is False
    assert his_mock.call_count == 0


def test_transport_errors_are_reported_not_raised(his_mock):
    his_mock.get(CURRENT_URL, exc=requests.exceptions.ConnectTimeout)

    resp = get_his_client().get_current_session()

    assert resp.success is False
    # raised without a message; the class name still says what went wrong
    assert resp.error == "ConnectTimeout"


def test_non_json_body_is_failure(his_mock):
    his_mock.put(f"{HIS_BASE}/visits/V-1/medical-record", text="<html>oops</html>")

    resp = get_his_client().update_visit("V-1", MedicalPayload())

    assert resp.success is False
    assert resp.error == "HIS returned a non-JSON body"


def test_visit_id_is_url_quoted(his_mock):
    his_mock.put(f"{HIS_BASE}/visits/V%2F7/medical-record", json={"ok": True})

    resp = get_his_client().update_visit("V/7", MedicalPayload(icd_codes=["I10"]))

    assert resp.success is True
    assert his_mock.last_request.json()["icdCodes"] == ["I10"]


def test_context_cache_and_force_refresh(his_mock):
    his_mock.get(CURRENT_URL, json={"success": True, "data": {"visitId": "V-1"}})
    client = HISClient(cache_seconds=60)

    client.get_current_session()
    client.get_current_session()
    assert his_mock.call_count == 1

    client.get_current_session(force_refresh=True)
    assert his_mock.call_count == 2
