# exam_core/examinations/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

PATIENT_NAME_REQUIRED = "Patient name is required."


class SessionCreateSerializer(serializers.Serializer):
    patientName = serializers.CharField(
        source="patient_name",
        max_length=255,
        error_messages={"required": PATIENT_NAME_REQUIRED, "blank": PATIENT_NAME_REQUIRED, "null": PATIENT_NAME_REQUIRED},
    )
    visitId = serializers.CharField(source="visit_id", max_length=64, required=False, allow_blank=True, allow_null=True)
    patientId = serializers.CharField(source="patient_id", max_length=64, required=False, allow_blank=True, allow_null=True)
    patientInfo = serializers.DictField(source="patient_info", required=False, default=dict)
    medicalHistory = serializers.CharField(source="medical_history", required=False, allow_blank=True, allow_null=True)
    chiefComplaint = serializers.CharField(source="chief_complaint", required=False, allow_blank=True, allow_null=True)

    def validate_patientName(self, value):
        if not value.strip():
            raise serializers.ValidationError(PATIENT_NAME_REQUIRED)
        return value.strip()


class SessionSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    visitId = serializers.CharField(source="visit_id", read_only=True, allow_null=True)
    patientId = serializers.CharField(source="patient_id", read_only=True, allow_null=True)
    visitNumber = serializers.IntegerField(source="visit_number", read_only=True, allow_null=True)
    patientName = serializers.CharField(source="patient_name", read_only=True)
    patientInfo = serializers.JSONField(source="patient_info", read_only=True)
    medicalHistory = serializers.CharField(source="medical_history", read_only=True, allow_null=True)
    chiefComplaint = serializers.CharField(source="chief_complaint", read_only=True, allow_null=True)
    status = serializers.CharField(read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)
