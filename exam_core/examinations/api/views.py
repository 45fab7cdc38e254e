# exam_core/examinations/api/views.py
from __future__ import annotations

import logging

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.views import APIView

from exam_core.common.api.exceptions import ConflictError, NotFoundError
from exam_core.common.api.pagination import paginate
from exam_core.common.api.responses import success_response
from exam_core.examinations.api.serializers import SessionCreateSerializer, SessionSerializer
from exam_core.examinations.selectors import get_session, list_sessions
from exam_core.examinations.services import SessionInput, SessionService
from exam_core.medical_records.api.serializers import MedicalRecordSerializer
from exam_core.medical_records.selectors import get_medical_record_by_session

logger = logging.getLogger(__name__)

SESSION_NOT_FOUND = "Session not found"


def require_session(session_id: str):
    session = get_session(session_id=session_id)
    if session is None:
        raise NotFoundError(SESSION_NOT_FOUND, message="The examination session does not exist.")
    return session


class SessionCreateView(APIView):
    """
    POST /api/session/create
    """

    @extend_schema(tags=["Sessions"], request=SessionCreateSerializer, responses={200: SessionSerializer})
    def post(self, request):
        ser = SessionCreateSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)

        session = SessionService.create_session(SessionInput(**ser.validated_data))
        logger.info("Created examination session %s", session.id)

        return success_response(
            SessionSerializer(session).data,
            message="Examination session created.",
            status=status.HTTP_200_OK,
        )


class SessionListView(APIView):
    """
    GET /api/sessions/?patient=&status=
    """

    @extend_schema(
        tags=["Sessions"],
        responses={200: SessionSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="patient", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def get(self, request):
        qs = list_sessions(
            patient_id=request.query_params.get("patient") or request.query_params.get("patient_id"),
            status=request.query_params.get("status"),
        )
        return paginate(request, qs, SessionSerializer)


class SessionDetailView(APIView):
    """
    GET /api/session/<session_id>: the session plus its medical record (or null).
    """

    @extend_schema(tags=["Sessions"], responses={200: OpenApiTypes.OBJECT, 404: OpenApiTypes.OBJECT})
    def get(self, request, session_id: str = ""):
        if not (session_id or "").strip():
            raise ValidationError({"detail": "Session ID is required"})

        session = require_session(session_id)
        record = get_medical_record_by_session(session_id=session.id)

        return success_response(
            {
                "session": SessionSerializer(session).data,
                "medicalRecord": MedicalRecordSerializer(record).data if record else None,
            }
        )


class SessionCancelView(APIView):
    """
    POST /api/session/<session_id>/cancel
    """

    @extend_schema(tags=["Sessions"], request=None, responses={200: SessionSerializer, 409: OpenApiTypes.OBJECT})
    def post(self, request, session_id: str):
        try:
            session = SessionService.cancel_session(session_id=session_id)
        except ValueError as e:
            raise ConflictError(str(e))

        if session is None:
            raise NotFoundError(SESSION_NOT_FOUND)
        return success_response(SessionSerializer(session).data, message="Examination session cancelled.")
