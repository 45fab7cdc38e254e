# tests/conftest.py
import pytest

from exam_core.conftest import api_client, his_mock, patient  # noqa: F401
from exam_core.medical_records.models import RecordStatus


@pytest.fixture
def soap_payload():
    return {
        "subjective": "Đau thượng vị 3 ngày",
        "objective": "Ấn đau vùng thượng vị",
        "assessment": "Viêm dạ dày",
        "plan": "PPI 4 tuần",
        "icdCodes": ["K29.7"],
        "status": RecordStatus.DRAFT,
    }
