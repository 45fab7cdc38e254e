# exam_core/examinations/services.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from django.db import transaction
from django.db.models import Max

from exam_core.audit.services import AuditService
from exam_core.examinations.constants import TERMINAL_STATUSES, UNKNOWN_PATIENT_NAME
from exam_core.examinations.models import ExaminationSession, SessionStatus
from exam_core.his import client as his

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionInput:
    patient_name: str | None = None
    visit_id: str | None = None  # from HIS, optional
    patient_id: str | None = None
    patient_info: dict[str, Any] = field(default_factory=dict)
    medical_history: str | None = None
    chief_complaint: str | None = None


def _his_context(data: SessionInput) -> dict[str, Any] | None:
    """
    HIS visit context, fetched only when the caller has no patient name or names a visit.
    Failures are logged by the adapter and simply mean "no backfill".
    """
    if data.patient_name and not data.visit_id:
        return None

    resp = his.get_his_client().get_current_session(force_refresh=True)
    if resp.success and resp.data:
        return resp.data

    logger.info("No HIS context for new session (visit_id=%s): %s", data.visit_id, resp.error)
    return None


def _next_visit_number(patient_id: str | None) -> int | None:
    if not patient_id:
        return None
    last = ExaminationSession.objects.filter(patient_id=patient_id).aggregate(m=Max("visit_number"))["m"]
    return (last or 0) + 1


class SessionService:
    # ---------------------------------------------------------------------
    # Lifecycle writes
    # ---------------------------------------------------------------------
    @staticmethod
    @transaction.atomic
    def create_session(data: SessionInput) -> ExaminationSession:
        """
        Create an active session. Explicit input fields always win over HIS-supplied ones.
        """
        his_data = _his_context(data) or {}
        his_patient = his_data.get("patientInfo") or {}
        his_context = his_data.get("context") or {}

        session = ExaminationSession.objects.create(
            visit_id=data.visit_id or his_data.get("visitId") or None,
            patient_id=data.patient_id or None,
            visit_number=_next_visit_number(data.patient_id),
            patient_name=data.patient_name or his_patient.get("name") or UNKNOWN_PATIENT_NAME,
            patient_info=data.patient_info or his_patient or {},
            medical_history=data.medical_history or his_context.get("medicalHistory") or None,
            chief_complaint=data.chief_complaint or his_context.get("chiefComplaint") or None,
            status=SessionStatus.ACTIVE,
        )

        AuditService.log(
            event_code="session.created",
            entity_type="ExaminationSession",
            entity_id=session.id,
            metadata={
                "visit_id": session.visit_id,
                "patient_id": session.patient_id,
                "his_backfill": bool(his_data),
            },
        )
        return session

    @staticmethod
    @transaction.atomic
    def update_session_status(*, session_id: str, status: str) -> None:
        """
        Unconditional status overwrite + timestamp bump. Callers are responsible for
        only requesting valid transitions (see cancel_session for a guarded one).
        """
        session = ExaminationSession.objects.filter(id=session_id).first()
        if session is None:
            return

        previous = session.status
        session.status = status
        session.save(update_fields=["status", "updated_at"])

        AuditService.log(
            event_code="session.status_changed",
            entity_type="ExaminationSession",
            entity_id=session_id,
            metadata={"from": previous, "to": status},
        )

    @staticmethod
    @transaction.atomic
    def cancel_session(*, session_id: str) -> ExaminationSession | None:
        """
        active -> cancelled. Returns None for an unknown id; raises ValueError when the
        session already reached a terminal state.
        """
        session = ExaminationSession.objects.select_for_update().filter(id=session_id).first()
        if session is None:
            return None

        if session.status in TERMINAL_STATUSES:
            raise ValueError(f"Only active sessions can be cancelled (current={session.status}).")

        SessionService.update_session_status(session_id=session_id, status=SessionStatus.CANCELLED)
        session.refresh_from_db()
        return session
