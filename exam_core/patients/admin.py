# exam_core/patients/admin.py
from django.contrib import admin

from exam_core.patients.models import Patient, PatientDisplayIdSequence


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = (
        "display_id",
        "name",
        "birth_date",
        "phone_number",
        "external_patient_id",
        "created_at",
    )
    search_fields = ("display_id", "name", "phone_number", "email")
    readonly_fields = ("id", "display_id", "created_at", "updated_at")
    ordering = ("-created_at",)


@admin.register(PatientDisplayIdSequence)
class PatientDisplayIdSequenceAdmin(admin.ModelAdmin):
    list_display = ("year", "last_value")
    ordering = ("-year",)
