# exam_core/patients/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

PATIENT_NAME_REQUIRED = "Patient name is required."


class PatientInputSerializer(serializers.Serializer):
    """
    Create contract (POST). camelCase on the wire, snake_case in validated_data.
    """
    name = serializers.CharField(
        max_length=255,
        error_messages={"required": PATIENT_NAME_REQUIRED, "blank": PATIENT_NAME_REQUIRED, "null": PATIENT_NAME_REQUIRED},
    )
    birthDate = serializers.DateField(source="birth_date", required=False, allow_null=True)
    gender = serializers.CharField(max_length=32, required=False, allow_blank=True, allow_null=True)
    phoneNumber = serializers.CharField(source="phone_number", max_length=32, required=False, allow_blank=True, allow_null=True)
    email = serializers.EmailField(required=False, allow_blank=True, allow_null=True)
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    medicalHistory = serializers.CharField(source="medical_history", required=False, allow_blank=True, allow_null=True)
    allergies = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    bloodType = serializers.CharField(source="blood_type", max_length=16, required=False, allow_blank=True, allow_null=True)
    externalPatientId = serializers.CharField(
        source="external_patient_id", max_length=64, required=False, allow_blank=True, allow_null=True
    )

    def validate_name(self, value):
        if not value.strip():
            raise serializers.ValidationError(PATIENT_NAME_REQUIRED)
        return value.strip()


class PatientUpdateSerializer(PatientInputSerializer):
    """
    Partial update contract (PATCH).
    """
    name = serializers.CharField(max_length=255, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class PatientSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    displayId = serializers.CharField(source="display_id", read_only=True)
    externalPatientId = serializers.CharField(source="external_patient_id", read_only=True, allow_null=True)
    name = serializers.CharField(read_only=True)
    birthDate = serializers.DateField(source="birth_date", read_only=True, allow_null=True)
    gender = serializers.CharField(read_only=True, allow_null=True)
    phoneNumber = serializers.CharField(source="phone_number", read_only=True, allow_null=True)
    email = serializers.CharField(read_only=True, allow_null=True)
    address = serializers.CharField(read_only=True, allow_null=True)
    medicalHistory = serializers.CharField(source="medical_history", read_only=True, allow_null=True)
    allergies = serializers.CharField(read_only=True, allow_null=True)
    bloodType = serializers.CharField(source="blood_type", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)


class PatientSearchResultSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    displayId = serializers.CharField(source="display_id", read_only=True)
    name = serializers.CharField(read_only=True)
    birthDate = serializers.DateField(source="birth_date", read_only=True, allow_null=True)
    phoneNumber = serializers.CharField(source="phone_number", read_only=True, allow_null=True)
    totalVisits = serializers.IntegerField(source="total_visits", read_only=True)
    lastVisitDate = serializers.DateTimeField(source="last_visit_date", read_only=True, allow_null=True)
