# exam_core/medical_records/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from django.db import transaction
from django.utils import timezone

from exam_core.audit.services import AuditService
from exam_core.examinations.models import ExaminationSession, SessionStatus
from exam_core.examinations.selectors import get_session
from exam_core.examinations.services import SessionService
from exam_core.his import client as his
from exam_core.medical_records.models import MedicalRecord, RecordStatus, SyncStatus

logger = logging.getLogger(__name__)

SOAP_FIELDS = ("subjective", "objective", "assessment", "plan")


@dataclass(frozen=True)
class MedicalRecordInput:
    """
    The complete record as the caller knows it. save_medical_record replaces every
    field with these values; anything omitted is cleared.
    """
    session_id: str
    status: str = RecordStatus.DRAFT
    subjective: str | None = None
    objective: str | None = None
    assessment: str | None = None
    plan: str | None = None
    icd_codes: list[str] = field(default_factory=list)


def _ensure_not_final(record: MedicalRecord | None) -> None:
    if record is not None and record.status == RecordStatus.FINAL:
        raise ValueError(f"Medical record for session {record.session_id} is already final.")


def _ensure_active(session: ExaminationSession) -> None:
    # completed and cancelled sessions are terminal
    if session.status != SessionStatus.ACTIVE:
        raise ValueError(f"Session {session.id} is {session.status}; its medical record can no longer change.")


class MedicalRecordService:
    # ---------------------------------------------------------------------
    # Replace / patch
    # ---------------------------------------------------------------------
    @staticmethod
    def save_medical_record(data: MedicalRecordInput) -> MedicalRecord:
        """
        Full-replace upsert keyed by session id. Raises ExaminationSession.DoesNotExist for
        an unknown session and ValueError when the session is no longer active or the
        existing record is already final.
        A resulting status of final triggers finalize_record once the local write committed.
        """
        record = MedicalRecordService._replace(data)

        if record.status == RecordStatus.FINAL:
            record = MedicalRecordService.finalize_record(session_id=data.session_id, record=record)
        return record

    @staticmethod
    @transaction.atomic
    def _replace(data: MedicalRecordInput) -> MedicalRecord:
        # Locking the session row serializes concurrent saves/finalizes of one session.
        session = ExaminationSession.objects.select_for_update().get(id=data.session_id)
        _ensure_active(session)

        record = MedicalRecord.objects.filter(session=session).first()
        _ensure_not_final(record)

        created = record is None
        if created:
            record = MedicalRecord(session=session)

        record.subjective = data.subjective or None
        record.objective = data.objective or None
        record.assessment = data.assessment or None
        record.plan = data.plan or None
        record.icd_codes = list(data.icd_codes or [])
        record.status = data.status
        if data.status == RecordStatus.FINAL:
            record.sync_status = SyncStatus.PENDING
        record.save()

        AuditService.log(
            event_code="medical_record.saved",
            entity_type="MedicalRecord",
            entity_id=record.id,
            metadata={"session_id": session.id, "status": record.status, "created": created},
        )
        return record

    @staticmethod
    def patch_medical_record(*, session_id: str, data: dict) -> MedicalRecord:
        """
        Sparse update of an existing draft: only the supplied fields change.
        Raises MedicalRecord.DoesNotExist when the session has no record yet.
        """
        record = MedicalRecordService._patch(session_id=session_id, data=data)

        if record.status == RecordStatus.FINAL:
            record = MedicalRecordService.finalize_record(session_id=session_id, record=record)
        return record

    @staticmethod
    @transaction.atomic
    def _patch(*, session_id: str, data: dict) -> MedicalRecord:
        session = ExaminationSession.objects.select_for_update().get(id=session_id)
        _ensure_active(session)

        record = MedicalRecord.objects.get(session_id=session_id)
        _ensure_not_final(record)

        allowed = {*SOAP_FIELDS, "icd_codes", "status"}
        updates = {k: (v if v != "" else None) for k, v in (data or {}).items() if k in allowed}

        for k, v in updates.items():
            setattr(record, k, v)
        if record.status == RecordStatus.FINAL:
            record.sync_status = SyncStatus.PENDING
        record.save()

        AuditService.log(
            event_code="medical_record.saved",
            entity_type="MedicalRecord",
            entity_id=record.id,
            metadata={"session_id": session_id, "status": record.status, "updated_fields": sorted(updates.keys())},
        )
        return record

    # ---------------------------------------------------------------------
    # Finalize
    # ---------------------------------------------------------------------
    @staticmethod
    def finalize_record(*, session_id: str, record: MedicalRecord) -> MedicalRecord:
        """
        Push the record to the HIS visit (when the session has one) and complete the session.

        The HIS outcome is only recorded in sync_status: a failed push never rolls back or
        blocks the local finalize, and the session ends up completed either way.
        """
        try:
            session = get_session(session_id=session_id)

            if session is not None and session.visit_id:
                payload = his.MedicalPayload(
                    subjective=record.subjective or "",
                    objective=record.objective or "",
                    assessment=record.assessment or "",
                    plan=record.plan or "",
                    icd_codes=list(record.icd_codes or []),
                )
                resp = his.get_his_client().update_visit(session.visit_id, payload)

                if resp.success:
                    logger.info("Medical record %s synced to HIS visit %s", record.id, session.visit_id)
                    record.sync_status = SyncStatus.SYNCED
                    record.sync_error = None
                    record.synced_at = timezone.now()
                else:
                    logger.warning(
                        "Failed to sync medical record %s to HIS visit %s: %s",
                        record.id,
                        session.visit_id,
                        resp.error,
                    )
                    record.sync_status = SyncStatus.SYNC_FAILED
                    record.sync_error = resp.error
            else:
                record.sync_status = SyncStatus.NOT_APPLICABLE
                record.sync_error = None

            record.save(update_fields=["sync_status", "sync_error", "synced_at", "updated_at"])
        finally:
            SessionService.update_session_status(session_id=session_id, status=SessionStatus.COMPLETED)

        AuditService.log(
            event_code="medical_record.finalized",
            entity_type="MedicalRecord",
            entity_id=record.id,
            metadata={"session_id": session_id, "sync_status": record.sync_status},
        )
        return record
