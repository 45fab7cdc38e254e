# exam_core/examinations/apps.py
from django.apps import AppConfig


class ExaminationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "exam_core.examinations"
