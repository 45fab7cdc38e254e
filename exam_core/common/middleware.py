# exam_core/common/middleware.py
from __future__ import annotations

from exam_core.common.api.exceptions import ensure_request_id


class RequestIdMiddleware:
    """
    Attaches request.request_id (honouring an incoming X-Request-Id) and echoes it
    back on every response, so log lines and error envelopes can be correlated.
    """

    HEADER = "X-Request-Id"

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        incoming = request.headers.get(self.HEADER)
        if incoming:
            request.request_id = incoming[:64]
        rid = ensure_request_id(request)

        response = self.get_response(request)
        response[self.HEADER] = rid
        return response
