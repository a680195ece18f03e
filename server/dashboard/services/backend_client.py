"""
Institution backend client.

Thin async wrapper over the institution REST API. Every endpoint answers with
the envelope {statusCode, success, message, data}; a `success: false` envelope,
a non-2xx status and a transport failure all surface as BackendError carrying
a message fit to show the user.
"""
import logging
from typing import Any, List, Optional, Type, TypeVar

import httpx
from fastapi import Request
from pydantic import BaseModel, ValidationError

from dashboard.config import settings
from dashboard.schemas import BackendEnvelope, Standard, StandardsPage, Student, StudentsPage

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class BackendError(Exception):
    """A backend call failed (transport error, HTTP error or success=false)."""

    def __init__(self, message: str, status_code: Optional[int] = None, server_message: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.server_message = server_message


class BackendClient:
    """Calls the institution backend on behalf of one dashboard request."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        domain: str = "institution-admin",
        page_limit: int = 10,
        authorization: Optional[str] = None,
    ):
        self.http = http
        self.domain = domain.strip("/")
        self.page_limit = page_limit
        self.authorization = authorization

    async def _request(
        self,
        method: str,
        path: str,
        fallback: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ) -> BackendEnvelope[Any]:
        url = f"/{self.domain}{path}"
        headers = {"Authorization": self.authorization} if self.authorization else None
        try:
            response = await self.http.request(method, url, params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.error("%s %s failed: %s", method, url, e)
            raise BackendError(fallback) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error:
            message = body.get("message") if isinstance(body, dict) else None
            logger.warning("%s %s -> HTTP %s: %s", method, url, response.status_code, message)
            raise BackendError(message or fallback, status_code=response.status_code, server_message=message)

        try:
            envelope = BackendEnvelope[Any].model_validate(body)
        except ValidationError as e:
            logger.error("%s %s returned an unreadable envelope: %s", method, url, e)
            raise BackendError(fallback, status_code=response.status_code) from e

        if not envelope.success:
            logger.warning("%s %s -> success=false: %s", method, url, envelope.message)
            raise BackendError(
                envelope.message or fallback,
                status_code=response.status_code,
                server_message=envelope.message or None,
            )
        return envelope

    @staticmethod
    def _parse(model: Type[M], data: Any, fallback: str) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error("Unexpected %s payload: %s", model.__name__, e)
            raise BackendError(fallback) from e

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    async def list_all_standards(self) -> List[Standard]:
        """Fetch every page of standards for the institution."""
        fallback = "Failed to fetch standards"
        standards: List[Standard] = []
        page = 1
        while True:
            envelope = await self._request("GET", "/standards", fallback, params={"page": page})
            data = self._parse(StandardsPage, envelope.data, fallback)
            standards.extend(data.standards)
            if page >= data.pagination.total_pages:
                break
            page += 1
        return standards

    async def list_all_students(self, standard_name: str, section_name: str) -> List[Student]:
        """Fetch every page of students in one standard/section."""
        fallback = "Failed to fetch students"
        students: List[Student] = []
        page = 1
        while True:
            params = {
                "page": page,
                "limit": self.page_limit,
                "standardName": standard_name,
                "sectionName": section_name,
            }
            envelope = await self._request("GET", "/students", fallback, params=params)
            data = self._parse(StudentsPage, envelope.data, fallback)
            students.extend(data.students)
            if page >= data.pagination.total_pages:
                break
            page += 1
        return students

    async def list_custom_exams(self) -> List[dict]:
        envelope = await self._request("GET", "/custom-exams/get", "Failed to fetch custom exams")
        return (envelope.data or {}).get("exams", [])

    async def get_custom_exam(self, exam_id: str) -> dict:
        envelope = await self._request("GET", f"/custom-exams/get/{exam_id}", "Failed to fetch exam details")
        return (envelope.data or {}).get("exam", {})

    async def list_custom_quizzes(self) -> List[dict]:
        envelope = await self._request("GET", "/custom-quizzes/get", "Failed to fetch custom quizzes")
        return (envelope.data or {}).get("quizzes", [])

    # ------------------------------------------------------------------
    # Create / assign
    # ------------------------------------------------------------------

    async def create_custom_exam(self, payload: dict) -> dict:
        envelope = await self._request("POST", "/custom-exams/create", "Failed to create exam", json=payload)
        return envelope.data or {}

    async def assign_custom_exam(self, payload: dict) -> dict:
        envelope = await self._request("POST", "/custom-exams/assign", "Failed to assign exam", json=payload)
        return envelope.data or {}

    async def create_custom_quiz(self, payload: dict) -> dict:
        envelope = await self._request("POST", "/custom-quizzes/create", "Failed to create quiz", json=payload)
        return envelope.data or {}

    async def assign_quiz(self, payload: dict) -> dict:
        envelope = await self._request("POST", "/quizzes/assign", "Failed to assign quiz", json=payload)
        return envelope.data or {}


# Shared connection pool, opened lazily and closed on shutdown
_http_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(
            base_url=settings.backend_base_url,
            timeout=settings.backend_timeout_seconds,
            headers={"Content-Type": "application/json"},
        )
    return _http_client


async def close_http_client() -> None:
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


def get_backend_client(request: Request) -> BackendClient:
    """FastAPI dependency: a backend client forwarding the caller's credentials."""
    return BackendClient(
        get_http_client(),
        domain=settings.backend_domain,
        page_limit=settings.backend_page_limit,
        authorization=request.headers.get("Authorization"),
    )
