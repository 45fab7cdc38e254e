# exam_core/medical_records/tests/test_medical_record_services.py
import pytest
import requests

from exam_core.audit.models import AuditEvent
from exam_core.conftest import HIS_BASE
from exam_core.examinations.models import ExaminationSession, SessionStatus
from exam_core.examinations.services import SessionService
from exam_core.medical_records.models import MedicalRecord, RecordStatus, SyncStatus
from exam_core.medical_records.services import MedicalRecordInput, MedicalRecordService

pytestmark = pytest.mark.django_db

VISIT_URL = f"{HIS_BASE}/visits/V-100/medical-record"


def test_save_is_an_upsert_per_session(session):
    first = MedicalRecordService.save_medical_record(
        MedicalRecordInput(session_id=session.id, subjective="Đau bụng")
    )
    second = MedicalRecordService.save_medical_record(
        MedicalRecordInput(session_id=session.id, subjective="Đau bụng 2 ngày")
    )

    assert first.id == second.id
    assert first.id.startswith("rec_")
    assert MedicalRecord.objects.filter(session=session).count() == 1
    assert MedicalRecord.objects.get(session=session).subjective == "Đau bụng 2 ngày"


def test_save_replaces_every_field(session):
    MedicalRecordService.save_medical_record(
        MedicalRecordInput(session_id=session.id, subjective="S", plan="P", icd_codes=["K29.7"])
    )
    record = MedicalRecordService.save_medical_record(
        MedicalRecordInput(session_id=session.id, assessment="A")
    )

    record.refresh_from_db()
    assert record.subjective is None
    assert record.plan is None
    assert record.icd_codes == []
    assert record.assessment == "A"


def test_save_for_unknown_session_raises():
    with pytest.raises(ExaminationSession.DoesNotExist):
        MedicalRecordService.save_medical_record(MedicalRecordInput(session_id="sess_missing"))


def test_final_without_visit_completes_session_without_his(session, his_mock):
    record = MedicalRecordService.save_medical_record(
        MedicalRecordInput(session_id=session.id, assessment="Viêm dạ dày", status=RecordStatus.FINAL)
    )

    session.refresh_from_db()
    assert session.status == SessionStatus.COMPLETED
    assert record.sync_status == SyncStatus.NOT_APPLICABLE
    assert not any("/visits/" in req.url for req in his_mock.request_history)


def test_final_pushes_soap_to_his_visit(his_session, his_mock):
    his_mock.put(VISIT_URL, json={"success": True, "data": {}})

    record = MedicalRecordService.save_medical_record(
        MedicalRecordInput(
            session_id=his_session.id,
            subjective="S",
            objective="O",
            assessment="A",
            plan="P",
            icd_codes=["K29.7", "I10"],
            status=RecordStatus.FINAL,
        )
    )

    push = his_mock.request_history[-1]
    assert push.method == "PUT"
    assert push.headers["Authorization"] == "Bearer test-key"
    assert push.json() == {
        "subjective": "S",
        "objective": "O",
        "assessment": "A",
        "plan": "P",
        "icdCodes": ["K29.7", "I10"],
    }

    record.refresh_from_db()
    assert record.sync_status == SyncStatus.SYNCED
    assert record.synced_at is not None
    assert AuditEvent.objects.filter(event_code="medical_record.finalized", entity_id=record.id).exists()


@pytest.mark.parametrize(
    "response_kwargs",
    [
        {"json": {"success": False, "error": "Visit closed"}},
        {"status_code": 500},
    ],
)
def test_his_failure_does_not_block_finalize(his_session, his_mock, response_kwargs):
    his_mock.put(VISIT_URL, **response_kwargs)

    record = MedicalRecordService.save_medical_record(
        MedicalRecordInput(session_id=his_session.id, assessment="A", status=RecordStatus.FINAL)
    )

    his_session.refresh_from_db()
    record.refresh_from_db()
    assert his_session.status == SessionStatus.COMPLETED
    assert record.status == RecordStatus.FINAL
    assert record.sync_status == SyncStatus.SYNC_FAILED
    assert record.sync_error


def test_final_record_is_terminal(session):
    MedicalRecordService.save_medical_record(
        MedicalRecordInput(session_id=session.id, assessment="A", status=RecordStatus.FINAL)
    )

    with pytest.raises(ValueError):
        MedicalRecordService.save_medical_record(
            MedicalRecordInput(session_id=session.id, assessment="B", status=RecordStatus.FINAL)
        )
    with pytest.raises(ValueError):
        MedicalRecordService.patch_medical_record(session_id=session.id, data={"plan": "P"})

    assert MedicalRecord.objects.get(session=session).assessment == "A"


def test_patch_changes_only_given_fields(session):
    MedicalRecordService.save_medical_record(
        MedicalRecordInput(session_id=session.id, subjective="S", assessment="A")
    )

    record = MedicalRecordService.patch_medical_record(session_id=session.id, data={"plan": "P"})

    assert record.subjective == "S"
    assert record.assessment == "A"
    assert record.plan == "P"
    assert record.status == RecordStatus.DRAFT


def test_patch_without_record_raises(session):
    with pytest.raises(MedicalRecord.DoesNotExist):
        MedicalRecordService.patch_medical_record(session_id=session.id, data={"plan": "P"})


def test_patch_blank_clears_field(session):
    MedicalRecordService.save_medical_record(
        MedicalRecordInput(session_id=session.id, subjective="S", plan="P")
    )

    record = MedicalRecordService.patch_medical_record(session_id=session.id, data={"plan": ""})

    assert record.plan is None
    assert record.subjective == "S"


def test_cancelled_session_record_cannot_change(session):
    MedicalRecordService.save_medical_record(MedicalRecordInput(session_id=session.id, subjective="S"))
    SessionService.cancel_session(session_id=session.id)

    with pytest.raises(ValueError):
        MedicalRecordService.save_medical_record(
            MedicalRecordInput(session_id=session.id, assessment="A", status=RecordStatus.FINAL)
        )
    with pytest.raises(ValueError):
        MedicalRecordService.patch_medical_record(session_id=session.id, data={"status": RecordStatus.FINAL})

    session.refresh_from_db()
    record = MedicalRecord.objects.get(session=session)
    assert session.status == SessionStatus.CANCELLED
    assert record.status == RecordStatus.DRAFT
    assert record.assessment is None


def test_transport_error_is_kept_as_sync_error(his_session, his_mock):
    his_mock.put(VISIT_URL, exc=requests.exceptions.ReadTimeout)

    record = MedicalRecordService.save_medical_record(
        MedicalRecordInput(session_id=his_session.id, assessment="A", status=RecordStatus.FINAL)
    )

    record.refresh_from_db()
    assert record.sync_status == SyncStatus.SYNC_FAILED
    assert record.sync_error == "ReadTimeout"
