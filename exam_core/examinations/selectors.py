# exam_core/examinations/selectors.py
from __future__ import annotations

from django.db.models import QuerySet

from exam_core.examinations.models import ExaminationSession


def get_session(*, session_id: str) -> ExaminationSession | None:
    """
    Point lookup. Absence is a normal result, not an error.
    """
    return ExaminationSession.objects.filter(id=session_id).first()


def list_sessions(
    *,
    patient_id: str | None = None,
    status: str | None = None,
) -> QuerySet[ExaminationSession]:
    qs = ExaminationSession.objects.all()

    if patient_id:
        qs = qs.filter(patient_id=patient_id)

    if status:
        qs = qs.filter(status=status)

    return qs.order_by("-created_at")
