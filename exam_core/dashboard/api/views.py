# exam_core/dashboard/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework.views import APIView

from exam_core.common.api.responses import success_response
from exam_core.dashboard.services import get_dashboard_stats, get_recent_sessions

RECENT_SESSIONS_LIMIT = 5


class DashboardStatsView(APIView):
    """
    GET /api/dashboard/stats
    """

    @extend_schema(tags=["Dashboard"], responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        return success_response(
            stats=get_dashboard_stats(),
            recentSessions=get_recent_sessions(limit=RECENT_SESSIONS_LIMIT),
        )
