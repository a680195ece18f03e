"""
Custom exam / quiz history pages.

These are the listing pages the wizard starts from and returns to.
"""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from dashboard.services.backend_client import BackendClient, BackendError, get_backend_client

router = APIRouter(tags=["History"])


def history_error(e: BackendError, noun: str) -> JSONResponse:
    if e.status_code == 401:
        message = e.server_message or f"You do not have permission to view {noun} yet."
    else:
        message = f"Failed to fetch {noun}"
    return JSONResponse(status_code=502, content={"error": message})


def search_items(items: list, search: str) -> list:
    """Local title/topic filter; the backend is not asked to search."""
    term = search.strip().lower()
    if not term:
        return items
    return [
        item for item in items
        if term in str(item.get("title", "")).lower() or term in str(item.get("topic", "")).lower()
    ]


@router.get("/custom-exam")
async def custom_exam_history(
    search: str = Query("", description="Filter by title or topic"),
    client: BackendClient = Depends(get_backend_client),
):
    try:
        exams = await client.list_custom_exams()
    except BackendError as e:
        return history_error(e, "custom exams")
    return {"exams": search_items(exams, search), "totalCount": len(exams), "createUrl": "/custom-exam/grade"}


@router.get("/custom-exam/{exam_id}")
async def custom_exam_detail(exam_id: str, client: BackendClient = Depends(get_backend_client)):
    try:
        exam = await client.get_custom_exam(exam_id)
    except BackendError as e:
        return JSONResponse(status_code=502, content={"error": e.message})
    return {"exam": exam}


@router.get("/custom-quiz")
async def custom_quiz_history(
    search: str = Query("", description="Filter by title or topic"),
    client: BackendClient = Depends(get_backend_client),
):
    try:
        quizzes = await client.list_custom_quizzes()
    except BackendError as e:
        return history_error(e, "custom quizzes")
    return {"quizzes": search_items(quizzes, search), "totalCount": len(quizzes), "createUrl": "/custom-quiz/grade"}
