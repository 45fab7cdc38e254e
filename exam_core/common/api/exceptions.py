# exam_core/common/api/exceptions.py
from __future__ import annotations

import logging
import uuid
from typing import Any

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException, NotFound, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


def ensure_request_id(request) -> str:
    """
    Ensures request has a stable request_id attribute and returns it.
    Safe to call from middleware and DRF exception handler.
    """
    rid = getattr(request, "request_id", None) if request is not None else None
    if not rid:
        rid = uuid.uuid4().hex
        if request is not None:
            setattr(request, "request_id", rid)
    return rid


def build_error_envelope(
    *,
    request=None,
    code: str,
    error: str,
    message: str | None = None,
    details: Any = None,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """
    Canonical error envelope consumed by the browser client:
      {success: false, error, message, code, details, request_id, **extra}

    `error` is the short, stable error string ("Session not found",
    "POSSIBLE_DUPLICATE"); `message` is the user-facing text.
    """
    rid = ensure_request_id(request)
    body = {
        "success": False,
        "error": error,
        "message": message or error,
        "code": code,
        "details": details,
        "request_id": rid,
    }
    if extra:
        body.update(extra)
    return body


class EnvelopeError(APIException):
    """
    APIException that carries a user-facing message and extra top-level envelope keys.
    """
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request failed."
    default_code = "error"

    def __init__(self, detail=None, *, message: str | None = None, extra: dict[str, Any] | None = None, code=None):
        super().__init__(detail=detail or self.default_detail, code=code or self.default_code)
        self.message = message
        self.extra = extra or {}


class NotFoundError(EnvelopeError):
    """
    404 for an absent entity. Absence is a normal outcome at the service layer;
    only views turn it into this error.
    """
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class ConflictError(EnvelopeError):
    """
    409 Conflict that still flows through the global exception handler.
    Use when business rules block an action (e.g. cancelling a completed session).
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict."
    default_code = "conflict"


class PossibleDuplicateError(EnvelopeError):
    """
    Signaled soft failure: the caller must review `duplicates` and re-submit via the force path.
    """
    status_code = status.HTTP_409_CONFLICT
    default_detail = "POSSIBLE_DUPLICATE"
    default_code = "possible_duplicate"


class DatabaseError(EnvelopeError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "DATABASE_ERROR"
    default_code = "database_error"


def _code_for(exc: Exception, http_status: int) -> str:
    if isinstance(exc, ValidationError):
        return "validation_error"
    if isinstance(exc, (Http404, NotFound)):
        return "not_found"
    if isinstance(exc, APIException):
        return getattr(exc, "default_code", "api_error") or "api_error"
    if http_status >= 500:
        return "server_error"
    return "error"


def _first_message(data: Any) -> str | None:
    if isinstance(data, dict):
        for value in data.values():
            found = _first_message(value)
            if found:
                return found
        return None
    if isinstance(data, (list, tuple)):
        for value in data:
            found = _first_message(value)
            if found:
                return found
        return None
    return str(data) if data is not None else None


def api_exception_handler(exc: Exception, context: dict[str, Any]):
    request = context.get("request")
    response = drf_exception_handler(exc, context)

    # Truly unhandled error
    if response is None:
        logger.exception("Unhandled API error: %s", exc)
        return Response(
            build_error_envelope(
                request=request,
                code="server_error",
                error="Internal server error",
                message="Unexpected server error.",
                details=str(exc),
            ),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    http_status = response.status_code
    code = _code_for(exc, http_status)
    data = response.data

    if isinstance(exc, EnvelopeError):
        error = str(exc.detail)
        return Response(
            build_error_envelope(
                request=request,
                code=code,
                error=error,
                message=exc.message,
                details=None,
                extra=exc.extra,
            ),
            status=http_status,
            headers=response.headers,
        )

    # Message + details rules:
    # 1) {"detail": "..."} only -> error=detail, details=None
    # 2) {"detail": "...", ...} -> error=detail, details={...without detail}
    # 3) field errors -> error="Validation error", message=first field message, details=data
    if isinstance(data, dict) and "detail" in data:
        error = str(data.get("detail"))
        rest = {k: v for k, v in data.items() if k != "detail"}
        message = None
        details = rest or None
    elif code == "validation_error":
        error = "Validation error"
        message = _first_message(data)
        details = data
    else:
        error = "Request failed."
        message = None
        details = data

    return Response(
        build_error_envelope(
            request=request,
            code=code,
            error=error,
            message=message,
            details=details,
        ),
        status=http_status,
        headers=response.headers,
    )
