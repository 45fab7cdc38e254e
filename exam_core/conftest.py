# exam_core/conftest.py
import re

import pytest
from requests_mock import ANY
from rest_framework.test import APIClient

from exam_core.examinations.services import SessionInput, SessionService
from exam_core.his import client as his
from exam_core.patients.services import PatientInput, PatientService

HIS_BASE = "http://his.test/api"


@pytest.fixture(autouse=True)
def his_mock(requests_mock):
    """
    Every test runs behind requests-mock with the HIS answering 503 to anything
    a test has not registered itself. Later registrations take precedence.
    """
    requests_mock.register_uri(ANY, re.compile(re.escape(HIS_BASE)), status_code=503)
    his.clear_context_cache()
    yield requests_mock
    his.clear_context_cache()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def patient(db):
    return PatientService.force_create_patient(
        PatientInput(
            name="Nguyen Van A",
            phone_number="0901234567",
            gender="male",
        )
    )


@pytest.fixture
def session(db, patient):
    return SessionService.create_session(
        SessionInput(
            patient_name=patient.name,
            patient_id=patient.id,
            chief_complaint="Đau bụng",
        )
    )


@pytest.fixture
def his_session(db):
    """Session linked to HIS visit V-100."""
    return SessionService.create_session(
        SessionInput(patient_name="Tran Thi B", visit_id="V-100")
    )
