# exam_core/examinations/models.py
from django.db import models

from exam_core.common.models import TimeStampedModel, time_random_id


class SessionStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


def generate_session_id() -> str:
    return time_random_id("sess")


class ExaminationSession(TimeStampedModel):
    """
    One clinical encounter. Patient name/info/history are snapshotted at creation
    and are never re-joined from Patient.
    """
    id = models.CharField(primary_key=True, max_length=64, default=generate_session_id, editable=False)

    # HIS integration
    visit_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)

    # Plain reference, no FK cascade: the snapshot below is authoritative for the session.
    patient_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)
    # nth session of that patient, 1-based; None for walk-ins without a patient_id
    visit_number = models.PositiveIntegerField(null=True, blank=True)

    patient_name = models.CharField(max_length=255)
    patient_info = models.JSONField(default=dict, blank=True)  # {age, gender, address, phoneNumber, ...}
    medical_history = models.TextField(null=True, blank=True)
    chief_complaint = models.TextField(null=True, blank=True)

    status = models.CharField(
        max_length=16,
        choices=SessionStatus.choices,
        default=SessionStatus.ACTIVE,
        db_index=True,
    )

    class Meta:
        db_table = "examination_sessions"
        indexes = [
            models.Index(fields=["status", "created_at"]),
            models.Index(fields=["patient_id", "created_at"]),
        ]

    def __str__(self) -> str:
        return f"ExaminationSession({self.patient_name}, {self.status})"
