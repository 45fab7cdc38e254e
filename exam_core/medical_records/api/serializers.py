# exam_core/medical_records/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from exam_core.medical_records.models import RecordStatus


def normalize_icd_codes(codes) -> list[str]:
    """
    Trim + upper-case, drop blanks and repeats, keep the doctor's order.
    """
    out: list[str] = []
    for raw in codes or []:
        code = str(raw).strip().upper()
        if code and code not in out:
            out.append(code)
    return out


class MedicalRecordInputSerializer(serializers.Serializer):
    """
    Full-replace contract (PUT): send the whole record every time.
    """
    subjective = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    objective = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    assessment = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    plan = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    icdCodes = serializers.ListField(
        source="icd_codes",
        child=serializers.CharField(max_length=16, allow_blank=True),
        required=False,
        default=list,
    )
    status = serializers.ChoiceField(choices=RecordStatus.choices)

    def validate_icdCodes(self, value):
        return normalize_icd_codes(value)


class MedicalRecordPatchSerializer(MedicalRecordInputSerializer):
    """
    Sparse contract (PATCH): only the supplied fields change.
    """
    icdCodes = serializers.ListField(
        source="icd_codes",
        child=serializers.CharField(max_length=16, allow_blank=True),
        required=False,
    )
    status = serializers.ChoiceField(choices=RecordStatus.choices, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field is required.")
        return attrs


class MedicalRecordSerializer(serializers.Serializer):
    id = serializers.CharField(read_only=True)
    sessionId = serializers.CharField(source="session_id", read_only=True)
    subjective = serializers.CharField(read_only=True, allow_null=True)
    objective = serializers.CharField(read_only=True, allow_null=True)
    assessment = serializers.CharField(read_only=True, allow_null=True)
    plan = serializers.CharField(read_only=True, allow_null=True)
    icdCodes = serializers.ListField(source="icd_codes", child=serializers.CharField(), read_only=True)
    status = serializers.CharField(read_only=True)
    syncStatus = serializers.CharField(source="sync_status", read_only=True)
    syncError = serializers.CharField(source="sync_error", read_only=True, allow_null=True)
    syncedAt = serializers.DateTimeField(source="synced_at", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)
