# exam_core/patients/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action

from exam_core.common.api.exceptions import DatabaseError, NotFoundError, PossibleDuplicateError
from exam_core.common.api.pagination import parse_page_params
from exam_core.common.api.responses import success_response
from exam_core.patients.api.serializers import (
    PatientInputSerializer,
    PatientSearchResultSerializer,
    PatientSerializer,
    PatientUpdateSerializer,
)
from exam_core.patients.selectors import get_patient, get_patient_by_display_id, search_patients
from exam_core.patients.services import PatientInput, PatientService

PATIENT_NOT_FOUND = "Patient not found"


class PatientViewSet(viewsets.ViewSet):
    serializer_class = PatientSerializer

    @extend_schema(
        tags=["Patients"],
        responses={200: PatientSearchResultSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="q", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="page", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="limit", type=OpenApiTypes.INT, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        page, limit = parse_page_params(request)
        q = request.query_params.get("q", "").strip()

        result = search_patients(query=q, page=page, limit=limit)

        return success_response(
            patients=PatientSearchResultSerializer(result.patients, many=True).data,
            total=result.total,
            pages=result.pages,
            page=result.page,
            limit=result.limit,
        )

    @extend_schema(tags=["Patients"], request=PatientInputSerializer, responses={201: PatientSerializer})
    def create(self, request):
        ser = PatientInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        result = PatientService.create_patient(PatientInput(**ser.validated_data))

        if not result.success:
            if result.duplicates:
                raise PossibleDuplicateError(
                    message="Possible duplicate patients found. Review them or confirm to create a new patient.",
                    extra={"duplicates": PatientSerializer(result.duplicates, many=True).data},
                )
            raise DatabaseError(message="Could not create patient.")

        return success_response(PatientSerializer(result.patient).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Patients"], request=PatientInputSerializer, responses={201: PatientSerializer})
    @action(detail=False, methods=["post"], url_path="force")
    def force_create(self, request):
        ser = PatientInputSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        patient = PatientService.force_create_patient(PatientInput(**ser.validated_data))
        return success_response(PatientSerializer(patient).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Patients"], responses={200: PatientSerializer})
    @action(detail=False, methods=["get"], url_path=r"display/(?P<display_id>[^/]+)")
    def by_display_id(self, request, display_id=None):
        patient = get_patient_by_display_id(display_id=display_id)
        if patient is None:
            raise NotFoundError(PATIENT_NOT_FOUND)
        return success_response(PatientSerializer(patient).data)

    @extend_schema(tags=["Patients"], responses={200: PatientSerializer})
    def retrieve(self, request, pk=None):
        patient = get_patient(patient_id=pk)
        if patient is None:
            raise NotFoundError(PATIENT_NOT_FOUND)
        return success_response(PatientSerializer(patient).data)

    @extend_schema(tags=["Patients"], request=PatientUpdateSerializer, responses={200: PatientSerializer})
    def partial_update(self, request, pk=None):
        ser = PatientUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        patient = PatientService.update_patient(patient_id=pk, data=ser.validated_data)
        if patient is None:
            raise NotFoundError(PATIENT_NOT_FOUND)
        return success_response(PatientSerializer(patient).data)
