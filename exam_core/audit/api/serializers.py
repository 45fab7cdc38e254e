# exam_core/audit/api/serializers.py
from rest_framework import serializers

from exam_core.audit.models import AuditEvent


class AuditEventSerializer(serializers.ModelSerializer):
    class Meta:
        model = AuditEvent
        fields = [
            "id",
            "event_code",
            "entity_type",
            "entity_id",
            "metadata",
            "occurred_at",
        ]
        read_only_fields = fields
