# exam_core/examinations/admin.py
from __future__ import annotations

from django.contrib import admin

from exam_core.examinations.models import ExaminationSession


@admin.register(ExaminationSession)
class ExaminationSessionAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "patient_name",
        "patient_id",
        "visit_number",
        "visit_id",
        "status",
        "created_at",
        "updated_at",
    )
    list_filter = ("status",)
    search_fields = ("id", "patient_name", "patient_id", "visit_id")
    readonly_fields = ("id", "created_at", "updated_at")
    ordering = ("-created_at",)
