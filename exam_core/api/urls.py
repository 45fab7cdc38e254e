# exam_core/api/urls.py
from __future__ import annotations

from django.urls import path, re_path
from rest_framework.routers import DefaultRouter

from exam_core.audit.api.views import AuditEventViewSet
from exam_core.dashboard.api.views import DashboardStatsView
from exam_core.examinations.api.views import (
    SessionCancelView,
    SessionCreateView,
    SessionDetailView,
    SessionListView,
)
from exam_core.medical_records.api.views import MedicalRecordView
from exam_core.patients.api.views import PatientViewSet

router = DefaultRouter()

router.register(r"patients", PatientViewSet, basename="patients")
router.register(r"audit/events", AuditEventViewSet, basename="audit-events")

# Session routes keep the browser client's slash-less paths; a trailing slash is also accepted.
urlpatterns = [
    re_path(r"^session/create/?$", SessionCreateView.as_view(), name="session-create"),
    re_path(r"^session/?$", SessionDetailView.as_view(), name="session-detail-missing-id"),
    re_path(r"^session/(?P<session_id>[^/]+)/cancel/?$", SessionCancelView.as_view(), name="session-cancel"),
    re_path(r"^session/(?P<session_id>[^/]+)/record/?$", MedicalRecordView.as_view(), name="session-record"),
    re_path(r"^session/(?P<session_id>[^/]+)/?$", SessionDetailView.as_view(), name="session-detail"),
    path("sessions/", SessionListView.as_view(), name="session-list"),
    re_path(r"^dashboard/stats/?$", DashboardStatsView.as_view(), name="dashboard-stats"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
