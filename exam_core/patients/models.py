# exam_core/patients/models.py
from django.db import models

from exam_core.common.models import TimeStampedModel, prefixed_uuid


def generate_patient_id() -> str:
    return prefixed_uuid("pat")


class Patient(TimeStampedModel):
    """
    Patient identity. Never hard-deleted; sessions snapshot name/info at creation time.
    """
    id = models.CharField(primary_key=True, max_length=64, default=generate_patient_id, editable=False)

    # human-readable, BN-<year>-<6-digit sequence>
    display_id = models.CharField(max_length=32, unique=True)
    external_patient_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)

    name = models.CharField(max_length=255)
    birth_date = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=32, null=True, blank=True)
    phone_number = models.CharField(max_length=32, null=True, blank=True)
    email = models.EmailField(null=True, blank=True)
    address = models.TextField(null=True, blank=True)

    medical_history = models.TextField(null=True, blank=True)
    allergies = models.TextField(null=True, blank=True)
    blood_type = models.CharField(max_length=16, null=True, blank=True)

    class Meta:
        db_table = "patients"
        indexes = [
            models.Index(fields=["phone_number"]),
            models.Index(fields=["name", "birth_date"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.display_id})"


class PatientDisplayIdSequence(models.Model):
    """
    Last issued display-id sequence per calendar year.
    Incremented under a row lock, so allocation is a single atomic step.
    """
    year = models.PositiveIntegerField(primary_key=True)
    last_value = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "patient_display_id_sequences"

    def __str__(self) -> str:
        return f"{self.year}: {self.last_value}"
