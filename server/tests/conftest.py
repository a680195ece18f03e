"""
Test configuration and fixtures.

The institution backend is replaced by an in-process fake served through
httpx.MockTransport, and the dashboard app is driven through ASGITransport.
"""
import asyncio
import json
from typing import AsyncGenerator, Dict, List, Optional

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from dashboard.main import app
from dashboard.services.backend_client import BackendClient, get_backend_client
from dashboard.services.commit import _commit_locks
from dashboard.storage import wizard_session_seen_db, wizard_sessions_db

SESSION_ID = "test-session"
INSTITUTION_ID = "inst-1"


def envelope(data=None, success: bool = True, message: str = "OK", status_code: int = 200) -> httpx.Response:
    return httpx.Response(
        status_code,
        json={"statusCode": status_code, "success": success, "message": message, "data": data},
    )


def make_student(index: int) -> dict:
    return {
        "id": f"st{index}",
        "email": f"student{index}@school.test",
        "firstName": f"First{index}",
        "lastName": f"Last{index}",
        "isActive": True,
    }


class FakeBackend:
    """Stand-in for the institution REST API; records every call it receives."""

    def __init__(self):
        self.standards: List[dict] = [
            {"id": "g5", "name": "g5 name", "sections": [{"id": "sA", "name": "A"}]},
            {"id": "g6", "name": "Grade 6", "sections": [{"id": "sB", "name": "B"}, {"id": "sC", "name": "C"}]},
            {"id": "g7", "name": "Grade 7", "sections": []},
        ]
        self.students: List[dict] = [make_student(i) for i in range(1, 4)]
        self.page_limit = 2
        self.calls: List[httpx.Request] = []

        # Overridable responses for the commit endpoints
        self.create_response: Optional[httpx.Response] = None
        self.assign_response: Optional[httpx.Response] = None
        self.fail_assign_with_network_error = False
        self.fail_listings = False
        self.history_response: Optional[httpx.Response] = None

        # Set to block the create call until released
        self.create_started = asyncio.Event()
        self.release_create: Optional[asyncio.Event] = None

    def paths(self, method: Optional[str] = None) -> List[str]:
        return [r.url.path for r in self.calls if method is None or r.method == method]

    def calls_to(self, suffix: str) -> List[httpx.Request]:
        return [r for r in self.calls if r.url.path.endswith(suffix)]

    def _page(self, items: List[dict], key: str, page: int) -> httpx.Response:
        total_pages = max(1, -(-len(items) // self.page_limit))
        start = (page - 1) * self.page_limit
        return envelope({
            key: items[start:start + self.page_limit],
            "pagination": {
                "currentPage": page,
                "totalPages": total_pages,
                "totalCount": len(items),
                "limit": self.page_limit,
            },
        })

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        path = request.url.path.split("/institution-admin", 1)[1]
        page = int(request.url.params.get("page", 1))

        if path == "/standards":
            if self.fail_listings:
                return envelope(success=False, message="boom", status_code=500)
            return self._page(self.standards, "standards", page)
        if path == "/students":
            if self.fail_listings:
                raise httpx.ConnectError("backend down", request=request)
            return self._page(self.students, "students", page)

        if path in ("/custom-exams/create", "/custom-quizzes/create"):
            self.create_started.set()
            if self.release_create is not None:
                await self.release_create.wait()
            if self.create_response is not None:
                return self.create_response
            id_field = "examId" if "exams" in path else "quizId"
            return envelope({id_field: "e1"}, message="Created")

        if path in ("/custom-exams/assign", "/quizzes/assign"):
            if self.fail_assign_with_network_error:
                raise httpx.ConnectError("connection reset", request=request)
            if self.assign_response is not None:
                return self.assign_response
            body = json.loads(request.content)
            count_field = "assignedCount" if "examId" in body else "assignedStudentsCount"
            return envelope({count_field: len(body["studentIds"])}, message="Assigned")

        if path.startswith("/custom-exams/get") or path == "/custom-quizzes/get":
            if self.history_response is not None:
                return self.history_response
            if path == "/custom-exams/get":
                return envelope({"exams": [
                    {"id": "e1", "title": "Fractions test", "topic": "Fractions"},
                    {"id": "e2", "title": "Plants", "topic": "Photosynthesis"},
                ]})
            if path == "/custom-quizzes/get":
                return envelope({"quizzes": [{"id": "q1", "title": "Weekly quiz", "topic": "Verbs"}]})
            return envelope({"exam": {"id": path.rsplit("/", 1)[1], "title": "Fractions test"}})

        return envelope(success=False, message="Not found", status_code=404)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest_asyncio.fixture
async def backend_http(backend: FakeBackend) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(
        base_url="http://backend.test/api/v1",
        transport=httpx.MockTransport(backend.handler),
    ) as http:
        yield http


@pytest.fixture
def backend_client(backend_http: httpx.AsyncClient, backend: FakeBackend) -> BackendClient:
    return BackendClient(backend_http, domain="institution-admin", page_limit=backend.page_limit)


@pytest.fixture(autouse=True)
def clean_wizard_state():
    """Every test starts with no wizard sessions and no commit locks."""
    wizard_sessions_db.clear()
    wizard_session_seen_db.clear()
    _commit_locks.clear()
    yield
    wizard_sessions_db.clear()
    wizard_session_seen_db.clear()
    _commit_locks.clear()


@pytest_asyncio.fixture
async def client(backend_client: BackendClient) -> AsyncGenerator[AsyncClient, None]:
    """Dashboard client bound to one wizard session and institution."""
    app.dependency_overrides[get_backend_client] = lambda: backend_client
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"X-Wizard-Session": SESSION_ID, "X-Institution-Id": INSTITUTION_ID},
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def store_values() -> Dict[str, str]:
    """Raw store of the test wizard session."""
    return wizard_sessions_db.setdefault(SESSION_ID, {})


# ==================== Wizard helpers ====================

def mcq(text: str = "2 + 2 = ?", correct: str = "4", wrong: str = "5") -> dict:
    return {
        "questionType": "MCQ",
        "questionText": text,
        "marks": 1,
        "bloomTaxonomy": "remember",
        "options": [
            {"optionText": correct, "isCorrect": True},
            {"optionText": wrong, "isCorrect": False},
        ],
    }


def short_answer(text: str, answer: str) -> dict:
    return {
        "questionType": "SHORT",
        "questionText": text,
        "marks": 2,
        "bloomTaxonomy": "understand",
        "correctAnswer": answer,
    }


def exam_form(title: str = "Fractions test", questions: Optional[list] = None) -> dict:
    return {
        "examDetails": {
            "title": title,
            "subject": "Math",
            "topic": "Fractions",
            "timeLimitMinutes": 45,
            "instructions": "Answer all questions",
        },
        "description": "Unit 3 check",
        "questions": questions if questions is not None else [mcq()],
    }


def quiz_form(title: str = "Weekly quiz") -> dict:
    return {
        "quizDetails": {
            "title": title,
            "subject": "English",
            "topic": "Verbs",
            "timeLimitMinutes": 20,
            "difficulty": "EASY",
        },
        "questions": [mcq("Pick the verb", "run", "blue")],
    }


async def walk_to_confirmation(client: AsyncClient, flow: str = "custom-exam", form: Optional[dict] = None) -> None:
    """Drive a wizard through grade, section, students and form."""
    response = await client.post(f"/{flow}/grade", json={"standardId": "g5"})
    assert response.status_code == 303
    response = await client.post(f"/{flow}/section", json={"sectionId": "sA"})
    assert response.status_code == 303
    response = await client.post(f"/{flow}/students", json={"selectAll": True})
    assert response.status_code == 303
    if form is None:
        form = exam_form() if flow == "custom-exam" else quiz_form()
    response = await client.post(f"/{flow}/form", json=form)
    assert response.status_code == 303
