# exam_core/medical_records/apps.py
from django.apps import AppConfig


class MedicalRecordsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "exam_core.medical_records"
