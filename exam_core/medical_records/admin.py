# exam_core/medical_records/admin.py
from __future__ import annotations

from django.contrib import admin

from exam_core.medical_records.models import MedicalRecord


@admin.register(MedicalRecord)
class MedicalRecordAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "session",
        "status",
        "sync_status",
        "synced_at",
        "created_at",
        "updated_at",
    )
    list_filter = ("status", "sync_status")
    search_fields = ("id", "session__id", "session__patient_name", "assessment")
    readonly_fields = ("id", "sync_status", "sync_error", "synced_at", "created_at", "updated_at")
