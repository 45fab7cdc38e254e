# exam_core/patients/tests/test_patient_services.py
from datetime import date

import pytest

from exam_core.audit.models import AuditEvent
from exam_core.examinations.services import SessionInput, SessionService
from exam_core.patients.models import Patient
from exam_core.patients.selectors import search_patients
from exam_core.patients.services import (
    POSSIBLE_DUPLICATE,
    PatientInput,
    PatientService,
)

pytestmark = pytest.mark.django_db


def test_duplicates_union_phone_and_name_birth_date():
    by_phone = PatientService.force_create_patient(PatientInput(name="Le Van C", phone_number="0911111111"))
    by_name = PatientService.force_create_patient(PatientInput(name="Nguyen Van A", birth_date=date(1980, 1, 2)))
    PatientService.force_create_patient(PatientInput(name="Nguyen Van A", birth_date=date(1990, 5, 5)))

    found = PatientService.find_possible_duplicates(
        PatientInput(name="Nguyen Van A", birth_date=date(1980, 1, 2), phone_number="0911111111")
    )

    assert {p.id for p in found} == {by_phone.id, by_name.id}


def test_duplicates_never_match_on_empty_criteria():
    PatientService.force_create_patient(PatientInput(name="No Phone"))

    assert PatientService.find_possible_duplicates(PatientInput(name="No Phone")) == []


def test_create_signals_duplicate_and_force_bypasses_it(patient):
    data = PatientInput(name="Someone Else", phone_number=patient.phone_number)
    before = Patient.objects.count()

    result = PatientService.create_patient(data)
    assert Patient.objects.count() == before
    assert result.success is False
    assert result.error == POSSIBLE_DUPLICATE
    assert [p.id for p in result.duplicates] == [patient.id]

    forced = PatientService.force_create_patient(data)
    assert forced.id != patient.id
    assert forced.display_id != patient.display_id
    assert AuditEvent.objects.filter(event_code="patient.force_created", entity_id=forced.id).exists()


def test_create_patient_success_stores_blank_fields_as_null():
    result = PatientService.create_patient(PatientInput(name="Pham Thi D", email="", address=""))

    assert result.success is True
    assert result.patient.id.startswith("pat_")
    assert result.patient.email is None
    assert result.patient.address is None


def test_update_patient_merges_only_given_fields(patient):
    updated = PatientService.update_patient(patient_id=patient.id, data={"allergies": "Penicillin"})

    assert updated.allergies == "Penicillin"
    assert updated.phone_number == patient.phone_number
    assert updated.display_id == patient.display_id


def test_update_unknown_patient_returns_none():
    assert PatientService.update_patient(patient_id="pat_missing", data={"name": "X"}) is None


def test_search_matches_name_phone_display_id_and_counts_visits(patient):
    other = PatientService.force_create_patient(PatientInput(name="Hoang Van E", phone_number="0988888888"))
    SessionService.create_session(SessionInput(patient_name=patient.name, patient_id=patient.id))
    SessionService.create_session(SessionInput(patient_name=patient.name, patient_id=patient.id))

    by_name = search_patients(query="van a")
    assert [p.id for p in by_name.patients] == [patient.id]
    assert by_name.patients[0].total_visits == 2
    assert by_name.patients[0].last_visit_date is not None

    assert [p.id for p in search_patients(query="0988").patients] == [other.id]
    assert [p.id for p in search_patients(query=other.display_id).patients] == [other.id]

    everyone = search_patients(query="")
    assert everyone.total == 2
    assert everyone.patients[0].id == other.id  # newest first
    assert everyone.patients[0].total_visits == 0


def test_search_pagination():
    for i in range(5):
        PatientService.force_create_patient(PatientInput(name=f"Patient {i}"))

    page = search_patients(query="patient", page=2, limit=2)

    assert page.total == 5
    assert page.pages == 3
    assert len(page.patients) == 2


def test_update_patient_blank_clears_field(patient):
    updated = PatientService.update_patient(patient_id=patient.id, data={"phone_number": "", "name": "Nguyen Van A"})

    assert updated.phone_number is None
    assert updated.name == "Nguyen Van A"
