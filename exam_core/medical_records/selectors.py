# exam_core/medical_records/selectors.py
from __future__ import annotations

from exam_core.medical_records.models import MedicalRecord


def get_medical_record_by_session(*, session_id: str) -> MedicalRecord | None:
    return MedicalRecord.objects.filter(session_id=session_id).first()
