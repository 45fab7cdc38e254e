# exam_core/patients/services.py
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from datetime import date

from django.conf import settings
from django.db import DatabaseError, transaction
from django.utils import timezone

from exam_core.audit.services import AuditService
from exam_core.patients.models import Patient, PatientDisplayIdSequence

logger = logging.getLogger(__name__)

POSSIBLE_DUPLICATE = "POSSIBLE_DUPLICATE"
DATABASE_ERROR = "DATABASE_ERROR"

SEQUENCE_WIDTH = 6


@dataclass(frozen=True)
class PatientInput:
    name: str
    birth_date: date | None = None
    gender: str | None = None
    phone_number: str | None = None
    email: str | None = None
    address: str | None = None
    medical_history: str | None = None
    allergies: str | None = None
    blood_type: str | None = None
    external_patient_id: str | None = None  # from HIS, if the patient exists there


@dataclass(frozen=True)
class PatientCreateResult:
    """
    Outcome of create_patient. A duplicate is a signaled result, not an exception:
    the caller shows `duplicates` and re-submits through force_create_patient if needed.
    """
    success: bool
    patient: Patient | None = None
    error: str | None = None
    duplicates: list[Patient] = field(default_factory=list)


def display_id_prefix(year: int) -> str:
    return f"{settings.PATIENT_DISPLAY_ID_PREFIX}-{year}-"


def _highest_existing_sequence(prefix: str) -> int:
    """
    Highest sequence already stored under `prefix`. Lexicographic order equals numeric
    order because sequences are zero-padded.
    """
    last = (
        Patient.objects.filter(display_id__startswith=prefix)
        .order_by("-display_id")
        .values_list("display_id", flat=True)
        .first()
    )
    if not last:
        return 0
    try:
        return int(last[len(prefix):])
    except ValueError:
        logger.warning("Ignoring malformed display id %s", last)
        return 0


class PatientService:
    # ---------------------------------------------------------------------
    # Display id
    # ---------------------------------------------------------------------
    @staticmethod
    @transaction.atomic
    def generate_display_id(*, year: int | None = None) -> str:
        """
        Next BN-<year>-<NNNNNN>. The year's counter row is locked for the read-increment-write,
        so concurrent registrations never receive the same id. The counter is reconciled with
        the highest stored id so rows written outside this service cannot be reissued.
        """
        year = year or timezone.localdate().year
        prefix = display_id_prefix(year)

        seq, _ = PatientDisplayIdSequence.objects.select_for_update().get_or_create(year=year)
        next_value = max(seq.last_value, _highest_existing_sequence(prefix)) + 1

        seq.last_value = next_value
        seq.save(update_fields=["last_value"])

        return f"{prefix}{next_value:0{SEQUENCE_WIDTH}d}"

    # ---------------------------------------------------------------------
    # Duplicate detection
    # ---------------------------------------------------------------------
    @staticmethod
    def find_possible_duplicates(data: PatientInput) -> list[Patient]:
        """
        Union of exact phone matches and exact (name + birth date) matches,
        deduplicated by id. Empty criteria are skipped, never treated as wildcards.
        """
        found: dict[str, Patient] = {}

        if data.phone_number:
            for p in Patient.objects.filter(phone_number=data.phone_number).order_by("created_at"):
                found.setdefault(p.id, p)

        if data.name and data.birth_date:
            for p in Patient.objects.filter(name=data.name, birth_date=data.birth_date).order_by("created_at"):
                found.setdefault(p.id, p)

        return list(found.values())

    # ---------------------------------------------------------------------
    # Writes
    # ---------------------------------------------------------------------
    @staticmethod
    def create_patient(data: PatientInput) -> PatientCreateResult:
        try:
            duplicates = PatientService.find_possible_duplicates(data)
            if duplicates:
                logger.info(
                    "Possible duplicate patient for %r: %s",
                    data.name,
                    [p.display_id for p in duplicates],
                )
                return PatientCreateResult(success=False, error=POSSIBLE_DUPLICATE, duplicates=duplicates)

            patient = PatientService._insert(data, event_code="patient.created")
        except DatabaseError:
            logger.exception("Error creating patient %r", data.name)
            return PatientCreateResult(success=False, error=DATABASE_ERROR)

        return PatientCreateResult(success=True, patient=patient)

    @staticmethod
    def force_create_patient(data: PatientInput) -> Patient:
        """
        Skips the duplicate check. Used after an operator has reviewed the candidates and
        confirmed this is a different person.
        """
        return PatientService._insert(data, event_code="patient.force_created")

    @staticmethod
    @transaction.atomic
    def _insert(data: PatientInput, *, event_code: str) -> Patient:
        values = {k: (v if v != "" else None) for k, v in asdict(data).items()}
        values["name"] = data.name

        patient = Patient.objects.create(
            display_id=PatientService.generate_display_id(),
            **values,
        )

        AuditService.log(
            event_code=event_code,
            entity_type="Patient",
            entity_id=patient.id,
            metadata={"display_id": patient.display_id},
        )
        return patient

    @staticmethod
    @transaction.atomic
    def update_patient(*, patient_id: str, data: dict) -> Patient | None:
        """
        Partial merge: only provided (allowed) fields change. Returns None for an unknown id.
        """
        patient = Patient.objects.select_for_update().filter(id=patient_id).first()
        if patient is None:
            return None

        allowed = {
            "name",
            "birth_date",
            "gender",
            "phone_number",
            "email",
            "address",
            "medical_history",
            "allergies",
            "blood_type",
            "external_patient_id",
        }
        # blanks clear a field, as on create; name is required and never blanked
        updates = {
            k: (None if v == "" and k != "name" else v)
            for k, v in (data or {}).items()
            if k in allowed
        }

        for k, v in updates.items():
            setattr(patient, k, v)
        patient.save()

        AuditService.log(
            event_code="patient.updated",
            entity_type="Patient",
            entity_id=patient.id,
            metadata={"updated_fields": sorted(updates.keys())},
        )

        patient.refresh_from_db()
        return patient
