# exam_core/common/api/pagination.py
from __future__ import annotations

import math

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class DefaultPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "limit"
    max_page_size = 200


def paginate(request, queryset, serializer_class, *, paginator: PageNumberPagination | None = None) -> Response:
    """
    Shared pagination helper to enforce a stable contract:
      { count, next, previous, results }
    """
    p = paginator or DefaultPagination()
    page = p.paginate_queryset(queryset, request)
    if page is not None:
        ser = serializer_class(page, many=True)
        return p.get_paginated_response(ser.data)

    # If pagination is disabled for some reason, fall back to a non-paginated list.
    ser = serializer_class(queryset, many=True)
    return Response(ser.data)


def parse_page_params(request, *, default_limit: int = 20, max_limit: int = 200) -> tuple[int, int]:
    """
    Reads ?page=&limit= (1-based page). Invalid or non-positive values fall back to defaults.
    """
    def _int(name: str, default: int) -> int:
        raw = request.query_params.get(name)
        try:
            value = int(raw)
        except (TypeError, ValueError):
            return default
        return value if value > 0 else default

    page = _int("page", 1)
    limit = min(_int("limit", default_limit), max_limit)
    return page, limit


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0
