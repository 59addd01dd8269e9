"""
Async HTTP client for the job portal API.

The session cookie set by /user/login lives in the httpx cookie jar and is
sent on every later request. A response only counts as a success when it
is 2xx AND its envelope says success: true; anything else raises one of
the ApiError subclasses below.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from jobportal.core.config import get_settings


class ApiError(Exception):
    """Base class for every failed API round-trip."""

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class UnauthenticatedError(ApiError):
    """No or invalid session (401)."""


class ForbiddenError(ApiError):
    """Valid session, wrong role or not the owner (403)."""


class NotFoundError(ApiError):
    """Referenced job, application or company is gone (404)."""


class ConflictError(ApiError):
    """Duplicate application (409)."""


class TransportError(ApiError):
    """Network failure, unexpected status, or a 2xx body with success: false."""


ERRORS_BY_STATUS = {
    401: UnauthenticatedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
}


class JobPortalClient:
    """Thin wrapper over httpx.AsyncClient, one method per endpoint."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout_s: Optional[float] = None,
    ) -> None:
        settings = get_settings()
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.api_base_url,
            transport=transport,
            timeout=timeout_s or settings.client_timeout_seconds,
        )

    async def __aenter__(self) -> "JobPortalClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, expect: Optional[str] = None, **kwargs: Any) -> Dict[str, Any]:
        """Send one request and return the envelope. expect names a data key the body must carry."""
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise TransportError(None, str(e) or e.__class__.__name__) from e

        try:
            body = resp.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            body = {}

        if resp.is_success and body.get("success") is True:
            if expect is not None and expect not in body:
                raise TransportError(resp.status_code, f"Response is missing '{expect}'")
            return body

        message = body.get("message") or resp.reason_phrase or "Request failed"
        error_cls = TransportError if resp.is_success else ERRORS_BY_STATUS.get(resp.status_code, TransportError)
        raise error_cls(resp.status_code, message)

    # --- session ---

    async def register(self, payload: Dict[str, Any]) -> str:
        body = await self._request("POST", "/user/register", json=payload)
        return body.get("message", "")

    async def login(self, email: str, password: str, role: str) -> Dict[str, Any]:
        body = await self._request("POST", "/user/login", "user", json={"email": email, "password": password, "role": role})
        return body["user"]

    async def logout(self) -> None:
        await self._request("POST", "/user/logout")

    async def me(self) -> Dict[str, Any]:
        body = await self._request("GET", "/user/me", "user")
        return body["user"]

    # --- companies ---

    async def register_company(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        body = await self._request("POST", "/company/register", "company", json=payload)
        return body["company"]

    async def get_companies(self) -> List[Dict[str, Any]]:
        body = await self._request("GET", "/company/get", "companies")
        return body["companies"]

    # --- jobs ---

    async def get_all_jobs(self, keyword: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"keyword": keyword} if keyword else None
        body = await self._request("GET", "/job", "jobs", params=params)
        return body["jobs"]

    async def get_admin_jobs(self) -> List[Dict[str, Any]]:
        body = await self._request("GET", "/job/getadminjobs", "jobs")
        return body["jobs"]

    async def get_job(self, job_id: str) -> Dict[str, Any]:
        body = await self._request("GET", f"/job/{job_id}", "job")
        return body["job"]

    async def create_job(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        body = await self._request("POST", "/job", "job", json=payload)
        return body["job"]

    # --- applications ---

    async def apply(self, job_id: str) -> None:
        await self._request("POST", f"/application/apply/{job_id}")

    async def get_applied_jobs(self) -> List[Dict[str, Any]]:
        body = await self._request("GET", "/application/get", "applications")
        return body["applications"]

    async def get_applicants(self, job_id: str) -> Dict[str, Any]:
        body = await self._request("GET", f"/application/{job_id}/applicants", "job")
        return body["job"]

    async def update_application_status(self, application_id: str, status: str) -> None:
        await self._request("PUT", f"/application/status/{application_id}", json={"status": status})
