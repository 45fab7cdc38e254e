# exam_core/audit/models.py
import uuid

from django.core.exceptions import ValidationError
from django.db import models


class AuditEvent(models.Model):
    """
    Immutable audit record.
    In clinical workflows, this becomes the ground-truth history of who-changed-what.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    event_code = models.CharField(max_length=128, db_index=True)  # e.g. "medical_record.finalized"
    entity_type = models.CharField(max_length=128, db_index=True)  # e.g. "MedicalRecord"
    entity_id = models.CharField(max_length=64, db_index=True)

    occurred_at = models.DateTimeField(auto_now_add=True, db_index=True)
    metadata = models.JSONField(default=dict, blank=True)

    class Meta:
        db_table = "audit_audit_event"
        indexes = [
            models.Index(fields=["entity_type", "entity_id"]),
            models.Index(fields=["event_code", "occurred_at"]),
        ]

    def __str__(self) -> str:
        return f"{self.event_code} {self.entity_type}:{self.entity_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValidationError("AuditEvent is immutable and cannot be modified once created.")
        return super().save(*args, **kwargs)
