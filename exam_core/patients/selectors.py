# exam_core/patients/selectors.py
from __future__ import annotations

from dataclasses import dataclass

from django.db.models import Count, IntegerField, OuterRef, Q, QuerySet, Subquery, Value
from django.db.models.functions import Coalesce

from exam_core.common.api.pagination import page_count
from exam_core.examinations.models import ExaminationSession
from exam_core.patients.models import Patient


@dataclass(frozen=True)
class PatientPage:
    patients: list[Patient]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return page_count(self.total, self.limit)


def get_patient(*, patient_id: str) -> Patient | None:
    return Patient.objects.filter(id=patient_id).first()


def get_patient_by_display_id(*, display_id: str) -> Patient | None:
    return Patient.objects.filter(display_id=display_id).first()


def _with_visit_stats(qs: QuerySet[Patient]) -> QuerySet[Patient]:
    """
    Annotates total_visits / last_visit_date from sessions linked by patient_id.
    """
    sessions = ExaminationSession.objects.filter(patient_id=OuterRef("id"))
    visit_count = (
        sessions.order_by()
        .values("patient_id")
        .annotate(c=Count("id"))
        .values("c")[:1]
    )
    last_visit = sessions.order_by("-created_at").values("created_at")[:1]

    return qs.annotate(
        total_visits=Coalesce(Subquery(visit_count, output_field=IntegerField()), Value(0)),
        last_visit_date=Subquery(last_visit),
    )


def search_patients(*, query: str | None = None, page: int = 1, limit: int = 20) -> PatientPage:
    """
    Substring match over name / phone / display id (OR), newest first.
    A blank query lists everyone.
    """
    qs = Patient.objects.all()

    qv = (query or "").strip()
    if qv:
        qs = qs.filter(
            Q(name__icontains=qv)
            | Q(phone_number__icontains=qv)
            | Q(display_id__icontains=qv)
        )

    total = qs.count()
    offset = (page - 1) * limit
    rows = list(_with_visit_stats(qs).order_by("-created_at", "-display_id")[offset:offset + limit])

    return PatientPage(patients=rows, total=total, page=page, limit=limit)


def list_patients(*, page: int = 1, limit: int = 20) -> PatientPage:
    return search_patients(query=None, page=page, limit=limit)
