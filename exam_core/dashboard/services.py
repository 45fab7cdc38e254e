# exam_core/dashboard/services.py
from __future__ import annotations

from datetime import datetime, time, timedelta

from django.db.models import Count, Q
from django.utils import timezone

from exam_core.examinations.constants import UNKNOWN_PATIENT_NAME
from exam_core.examinations.models import ExaminationSession, SessionStatus
from exam_core.medical_records.models import MedicalRecord
from exam_core.patients.models import Patient


def _boundaries(now: datetime) -> dict[str, datetime]:
    tz = timezone.get_current_timezone()
    local_now = timezone.localtime(now, tz)
    today_start = timezone.make_aware(datetime.combine(local_now.date(), time.min), tz)
    return {
        "today": today_start,
        "week": now - timedelta(days=7),
        "month": today_start.replace(day=1),
    }


def get_dashboard_stats(*, now: datetime | None = None) -> dict:
    """
    Counters for the doctor's home screen: today, the last 7 days, this month, all time.
    """
    now = now or timezone.now()
    b = _boundaries(now)

    today = ExaminationSession.objects.filter(created_at__gte=b["today"]).aggregate(
        total=Count("id"),
        completed=Count("id", filter=Q(status=SessionStatus.COMPLETED)),
        active=Count("id", filter=Q(status=SessionStatus.ACTIVE)),
    )

    return {
        "today": {
            "totalSessions": today["total"],
            "completedSessions": today["completed"],
            "activeSessions": today["active"],
        },
        "thisWeek": {
            "totalSessions": ExaminationSession.objects.filter(created_at__gte=b["week"]).count(),
            "newPatients": Patient.objects.filter(created_at__gte=b["week"]).count(),
        },
        "thisMonth": {
            "totalSessions": ExaminationSession.objects.filter(created_at__gte=b["month"]).count(),
            "newPatients": Patient.objects.filter(created_at__gte=b["month"]).count(),
        },
        "total": {
            "patients": Patient.objects.count(),
            "sessions": ExaminationSession.objects.count(),
        },
    }


def get_recent_sessions(*, limit: int = 10) -> list[dict]:
    """
    Newest sessions with the patient's display id and the record's assessment as diagnosis.
    """
    sessions = list(ExaminationSession.objects.order_by("-created_at")[:limit])

    patient_ids = {s.patient_id for s in sessions if s.patient_id}
    display_ids = dict(
        Patient.objects.filter(id__in=patient_ids).values_list("id", "display_id")
    )
    diagnoses = dict(
        MedicalRecord.objects.filter(session_id__in=[s.id for s in sessions]).values_list("session_id", "assessment")
    )

    return [
        {
            "id": s.id,
            "patientId": s.patient_id,
            "visitNumber": s.visit_number,
            "patientName": s.patient_name or UNKNOWN_PATIENT_NAME,
            "patientDisplayId": display_ids.get(s.patient_id) or "N/A",
            "chiefComplaint": s.chief_complaint,
            "status": s.status,
            "createdAt": s.created_at,
            "diagnosis": diagnoses.get(s.id) or None,
        }
        for s in sessions
    ]
