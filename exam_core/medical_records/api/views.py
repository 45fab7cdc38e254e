# exam_core/medical_records/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework.views import APIView

from exam_core.common.api.exceptions import ConflictError, NotFoundError
from exam_core.common.api.responses import success_response
from exam_core.examinations.models import ExaminationSession
from exam_core.medical_records.api.serializers import (
    MedicalRecordInputSerializer,
    MedicalRecordPatchSerializer,
    MedicalRecordSerializer,
)
from exam_core.medical_records.models import MedicalRecord
from exam_core.medical_records.selectors import get_medical_record_by_session
from exam_core.medical_records.services import MedicalRecordInput, MedicalRecordService


class MedicalRecordView(APIView):
    """
    /api/session/<session_id>/record

    GET   -> current record
    PUT   -> full replace (omitted fields are cleared)
    PATCH -> sparse update of a draft
    """

    @extend_schema(tags=["Medical Records"], responses={200: MedicalRecordSerializer, 404: OpenApiTypes.OBJECT})
    def get(self, request, session_id: str):
        record = get_medical_record_by_session(session_id=session_id)
        if record is None:
            raise NotFoundError("Medical record not found")
        return success_response(MedicalRecordSerializer(record).data)

    @extend_schema(
        tags=["Medical Records"],
        request=MedicalRecordInputSerializer,
        responses={200: MedicalRecordSerializer, 404: OpenApiTypes.OBJECT, 409: OpenApiTypes.OBJECT},
    )
    def put(self, request, session_id: str):
        ser = MedicalRecordInputSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        try:
            record = MedicalRecordService.save_medical_record(
                MedicalRecordInput(session_id=session_id, **ser.validated_data)
            )
        except ExaminationSession.DoesNotExist:
            raise NotFoundError("Session not found")
        except ValueError as e:
            # final records are terminal
            raise ConflictError(str(e))

        return success_response(MedicalRecordSerializer(record).data, message="Medical record saved.")

    @extend_schema(
        tags=["Medical Records"],
        request=MedicalRecordPatchSerializer,
        responses={200: MedicalRecordSerializer, 404: OpenApiTypes.OBJECT, 409: OpenApiTypes.OBJECT},
    )
    def patch(self, request, session_id: str):
        ser = MedicalRecordPatchSerializer(data=request.data or {}, partial=True)
        ser.is_valid(raise_exception=True)

        try:
            record = MedicalRecordService.patch_medical_record(session_id=session_id, data=ser.validated_data)
        except ExaminationSession.DoesNotExist:
            raise NotFoundError("Session not found")
        except MedicalRecord.DoesNotExist:
            raise NotFoundError("Medical record not found")
        except ValueError as e:
            raise ConflictError(str(e))

        return success_response(MedicalRecordSerializer(record).data, message="Medical record updated.")
