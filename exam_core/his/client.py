"""Best-effort bridge to the Hospital Information System (HIS).

Two operations are used by the rest of the application:

* :meth:`HISClient.get_current_session` returns the visit the HIS currently has
  open at this workstation (visit id, patient info and clinical context).
* :meth:`HISClient.update_visit` pushes a finalized SOAP note and its ICD-10
  codes back to that visit.

Every failure (HIS not configured, transport error, timeout, non-2xx response,
malformed body) is returned as ``HISResponse(success=False, error=...)`` and
logged. Nothing here raises for an unreachable HIS and nothing is retried: the
local record is authoritative and callers only observe the outcome.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

_context_cache: Dict[str, Any] = {"response": None, "expires_at": 0.0}
_context_lock = threading.Lock()


@dataclass(frozen=True)
class HISResponse:
    success: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class MedicalPayload:
    subjective: str = ""
    objective: str = ""
    assessment: str = ""
    plan: str = ""
    icd_codes: List[str] = field(default_factory=list)

    def to_json(self) -> Dict[str, Any]:
        return {
            "subjective": self.subjective,
            "objective": self.objective,
            "assessment": self.assessment,
            "plan": self.plan,
            "icdCodes": list(self.icd_codes),
        }


def clear_context_cache() -> None:
    with _context_lock:
        _context_cache["response"] = None
        _context_cache["expires_at"] = 0.0


class HISClient:
    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        cache_seconds: Optional[int] = None,
    ):
        self.base_url = (base_url if base_url is not None else settings.HIS_BASE_URL or "").rstrip("/")
        self.api_key = api_key if api_key is not None else settings.HIS_API_KEY
        self.timeout = timeout if timeout is not None else settings.HIS_TIMEOUT
        self.cache_seconds = cache_seconds if cache_seconds is not None else settings.HIS_CONTEXT_CACHE_SECONDS

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def _request(self, method: str, path: str, **kwargs) -> HISResponse:
        if not self.configured:
            logger.debug("HIS not configured; skipping %s %s", method, path)
            return HISResponse(success=False, error="HIS integration is not configured")

        url = f"{self.base_url}{path}"
        try:
            resp = requests.request(method, url, headers=self._headers(), timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            logger.warning("HIS %s %s failed: %s", method, url, exc)
            return HISResponse(success=False, error=str(exc) or exc.__class__.__name__)

        if not resp.ok:
            logger.warning("HIS %s %s returned HTTP %s", method, url, resp.status_code)
            return HISResponse(success=False, error=f"HIS returned HTTP {resp.status_code}")

        try:
            body = resp.json() if resp.content else {}
        except ValueError:
            logger.warning("HIS %s %s returned a non-JSON body", method, url)
            return HISResponse(success=False, error="HIS returned a non-JSON body")

        # The HIS wraps payloads as {success, data, error}; bare objects are accepted too.
        if isinstance(body, dict) and "success" in body:
            if not body.get("success"):
                return HISResponse(success=False, error=str(body.get("error") or "HIS reported failure"))
            return HISResponse(success=True, data=body.get("data"))

        return HISResponse(success=True, data=body if isinstance(body, dict) else {"result": body})

    def get_current_session(self, force_refresh: bool = False) -> HISResponse:
        """Visit context currently open in the HIS: ``{visitId, patientInfo, context}``.

        Successful answers are cached in-process for ``HIS_CONTEXT_CACHE_SECONDS``;
        ``force_refresh`` bypasses the cache.
        """
        now = time.time()
        with _context_lock:
            cached = _context_cache["response"]
            fresh = _context_cache["expires_at"] > now
        if not force_refresh and cached is not None and fresh:
            return cached

        result = self._request("GET", "/sessions/current")
        if result.success and not result.data:
            result = HISResponse(success=False, error="HIS has no current session")

        if result.success:
            with _context_lock:
                _context_cache["response"] = result
                _context_cache["expires_at"] = now + self.cache_seconds
        return result

    def update_visit(self, visit_id: str, payload: MedicalPayload) -> HISResponse:
        """Push a finalized medical record to the HIS visit ``visit_id``."""
        return self._request("PUT", f"/visits/{quote(str(visit_id), safe='')}/medical-record", json=payload.to_json())


def get_his_client() -> HISClient:
    return HISClient()
