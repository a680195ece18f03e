"""
Create/assign payload builders.

Turns the wizard's form state into the request bodies the institution backend
expects. The exam contract spells the Bloom field "bloomTaxanomy" (part of the
backend API); quiz questions carry no Bloom level.
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from dashboard.schemas import ExamFormData, McqQuestion, OpenEndedQuestion, QuizFormData


def _options_payload(question: McqQuestion) -> List[dict]:
    return [
        {"optionText": option.option_text, "isCorrect": option.is_correct}
        for option in question.options
    ]


def build_exam_question(question) -> dict:
    payload = {
        "questionText": question.question_text,
        "questionType": question.question_type,
        "marks": question.marks,
        "bloomTaxanomy": question.bloom_taxonomy,
    }
    if isinstance(question, McqQuestion):
        if question.options:
            payload["options"] = _options_payload(question)
    elif isinstance(question, OpenEndedQuestion) and question.correct_answer:
        payload["correctAnswer"] = question.correct_answer
    return payload


def build_exam_create_payload(form: ExamFormData) -> dict:
    return {
        "examDetails": form.exam_details.model_dump(mode="json", by_alias=True, exclude_none=True),
        "description": form.description or "",
        "questions": [build_exam_question(q) for q in form.questions],
    }


def build_quiz_create_payload(form: QuizFormData) -> dict:
    questions = [
        {
            "questionText": question.question_text,
            "marks": question.marks,
            "options": _options_payload(question),
        }
        for question in form.questions
    ]
    return {
        "quizDetails": form.quiz_details.model_dump(mode="json", by_alias=True),
        "classSection": form.class_section.model_dump(mode="json", by_alias=True),
        "questions": questions,
    }


def build_exam_assign_payload(
    resource_id: str,
    student_ids: List[str],
    institution_id: Optional[str] = None,
    due_days: int = 7,
) -> dict:
    payload = {"examId": resource_id, "studentIds": list(student_ids)}
    if institution_id:
        payload["institutionId"] = institution_id
    return payload


def build_quiz_assign_payload(
    resource_id: str,
    student_ids: List[str],
    institution_id: Optional[str] = None,
    due_days: int = 7,
) -> dict:
    due_date = datetime.now(timezone.utc) + timedelta(days=due_days)
    return {
        "quizId": resource_id,
        "studentIds": list(student_ids),
        "dueDate": due_date.isoformat().replace("+00:00", "Z"),
    }
