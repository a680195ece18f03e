"""
Institution backend client tests.
"""
import httpx
import pytest

from dashboard.services.backend_client import BackendClient, BackendError

from conftest import FakeBackend, envelope


class TestListings:

    @pytest.mark.asyncio
    async def test_standards_follow_every_page(self, backend: FakeBackend, backend_client: BackendClient):
        standards = await backend_client.list_all_standards()

        assert [s.id for s in standards] == ["g5", "g6", "g7"]
        pages = [r.url.params["page"] for r in backend.calls_to("/standards")]
        assert pages == ["1", "2"]

    @pytest.mark.asyncio
    async def test_students_sent_with_names(self, backend: FakeBackend, backend_client: BackendClient):
        students = await backend_client.list_all_students("g5 name", "A")

        assert [s.id for s in students] == ["st1", "st2", "st3"]
        request = backend.calls_to("/students")[0]
        assert request.url.params["standardName"] == "g5 name"
        assert request.url.params["sectionName"] == "A"
        assert request.url.params["limit"] == "2"

    @pytest.mark.asyncio
    async def test_http_error_raises(self, backend: FakeBackend, backend_client: BackendClient):
        backend.fail_listings = True

        with pytest.raises(BackendError) as exc_info:
            await backend_client.list_all_standards()
        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "boom"

    @pytest.mark.asyncio
    async def test_transport_error_uses_fallback_message(self, backend: FakeBackend, backend_client: BackendClient):
        backend.fail_listings = True

        with pytest.raises(BackendError, match="Failed to fetch students"):
            await backend_client.list_all_students("g5 name", "A")


class TestEnvelope:

    @pytest.mark.asyncio
    async def test_success_false_carries_server_message(self, backend: FakeBackend, backend_client: BackendClient):
        backend.create_response = envelope(success=False, message="duplicate title")

        with pytest.raises(BackendError) as exc_info:
            await backend_client.create_custom_exam({})
        assert exc_info.value.message == "duplicate title"
        assert exc_info.value.server_message == "duplicate title"

    @pytest.mark.asyncio
    async def test_unreadable_body_uses_fallback(self, backend: FakeBackend, backend_client: BackendClient):
        backend.create_response = httpx.Response(200, text="<html>")

        with pytest.raises(BackendError, match="Failed to create quiz"):
            await backend_client.create_custom_quiz({})

    @pytest.mark.asyncio
    async def test_authorization_forwarded(self, backend: FakeBackend, backend_http: httpx.AsyncClient):
        client = BackendClient(backend_http, authorization="Bearer token-1")

        await client.list_custom_quizzes()

        assert backend.calls[0].headers["Authorization"] == "Bearer token-1"


class TestHistoryCalls:

    @pytest.mark.asyncio
    async def test_exam_detail_unwrapped(self, backend_client: BackendClient):
        exam = await backend_client.get_custom_exam("e7")

        assert exam == {"id": "e7", "title": "Fractions test"}

    @pytest.mark.asyncio
    async def test_exam_listing_unwrapped(self, backend_client: BackendClient):
        exams = await backend_client.list_custom_exams()

        assert [e["id"] for e in exams] == ["e1", "e2"]
