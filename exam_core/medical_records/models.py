# exam_core/medical_records/models.py
from __future__ import annotations

from django.db import models

from exam_core.common.models import TimeStampedModel, time_random_id
from exam_core.examinations.models import ExaminationSession


class RecordStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    FINAL = "final", "Final"


class SyncStatus(models.TextChoices):
    NOT_APPLICABLE = "not_applicable", "Not applicable"  # session has no HIS visit
    PENDING = "pending", "Pending"
    SYNCED = "synced", "Synced"
    SYNC_FAILED = "sync_failed", "Sync failed"


def generate_record_id() -> str:
    return time_random_id("rec")


class MedicalRecord(TimeStampedModel):
    """
    SOAP note + ICD-10 codes for one examination session (at most one per session).
    A final record is terminal; the HIS push outcome is kept in sync_status.
    """
    id = models.CharField(primary_key=True, max_length=64, default=generate_record_id, editable=False)

    session = models.OneToOneField(
        ExaminationSession,
        on_delete=models.CASCADE,
        related_name="medical_record",
    )

    # SOAP
    subjective = models.TextField(null=True, blank=True)  # symptoms, patient's account
    objective = models.TextField(null=True, blank=True)  # vitals, clinical exam
    assessment = models.TextField(null=True, blank=True)  # diagnosis
    plan = models.TextField(null=True, blank=True)  # treatment plan

    icd_codes = models.JSONField(default=list, blank=True)  # ["K29.7", "I10"]

    status = models.CharField(
        max_length=16,
        choices=RecordStatus.choices,
        default=RecordStatus.DRAFT,
        db_index=True,
    )

    sync_status = models.CharField(
        max_length=16,
        choices=SyncStatus.choices,
        default=SyncStatus.NOT_APPLICABLE,
        db_index=True,
    )
    sync_error = models.TextField(null=True, blank=True)
    synced_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "medical_records"

    def __str__(self) -> str:
        return f"MedicalRecord({self.session_id}, {self.status})"
