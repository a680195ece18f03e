"""
Wizard flow definitions.

The custom exam and custom quiz wizards walk the same pages; they differ in
URLs, store-key prefix, payload shape and backend endpoints.
"""
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional, Type

from dashboard.models.session import WizardFlow
from dashboard.schemas import ExamFormData, QuizFormData, WizardFormData
from dashboard.services.backend_client import BackendClient
from dashboard.services import payloads


# Store keys in wizard order; a key depends on every key before it
SELECTED_STANDARD = "SelectedStandard"
GRADE_AND_SECTION = "GradeAndSection"
SELECTED_STUDENTS = "SelectedStudents"
FORM_DATA = "FormData"
COMMIT_STATE = "CommitState"

KEY_ORDER: List[str] = [SELECTED_STANDARD, GRADE_AND_SECTION, SELECTED_STUDENTS, FORM_DATA, COMMIT_STATE]

# Wizard steps (URL segments)
GRADE_STEP = "grade"
SECTION_STEP = "section"
STUDENTS_STEP = "students"
FORM_STEP = "form"
CONFIRMATION_STEP = "confirmation"


@dataclass(frozen=True)
class FlowConfig:
    flow: WizardFlow
    key_prefix: str
    noun: str
    id_field: str
    assigned_count_field: str
    form_model: Type[WizardFormData]
    build_create_payload: Callable[..., dict]
    build_assign_payload: Callable[..., dict]
    create: Callable[[BackendClient, dict], Awaitable[dict]]
    assign: Callable[[BackendClient, dict], Awaitable[dict]]
    requires_institution: bool = False

    @property
    def listing_url(self) -> str:
        return f"/{self.flow.value}"

    def step_url(self, step: str) -> str:
        return f"/{self.flow.value}/{step}"

    def key(self, name: str) -> str:
        return f"{self.key_prefix}{name}"

    @property
    def all_keys(self) -> List[str]:
        return [self.key(name) for name in KEY_ORDER]

    def extract_resource_id(self, data: dict) -> Optional[str]:
        value = data.get(self.id_field) or data.get("id")
        return str(value) if value else None


CUSTOM_EXAM = FlowConfig(
    flow=WizardFlow.CUSTOM_EXAM,
    key_prefix="customExam",
    noun="Exam",
    id_field="examId",
    assigned_count_field="assignedCount",
    form_model=ExamFormData,
    build_create_payload=payloads.build_exam_create_payload,
    build_assign_payload=payloads.build_exam_assign_payload,
    create=BackendClient.create_custom_exam,
    assign=BackendClient.assign_custom_exam,
    requires_institution=True,
)

CUSTOM_QUIZ = FlowConfig(
    flow=WizardFlow.CUSTOM_QUIZ,
    key_prefix="customQuiz",
    noun="Quiz",
    id_field="quizId",
    assigned_count_field="assignedStudentsCount",
    form_model=QuizFormData,
    build_create_payload=payloads.build_quiz_create_payload,
    build_assign_payload=payloads.build_quiz_assign_payload,
    create=BackendClient.create_custom_quiz,
    assign=BackendClient.assign_quiz,
)

FLOWS: Dict[WizardFlow, FlowConfig] = {
    WizardFlow.CUSTOM_EXAM: CUSTOM_EXAM,
    WizardFlow.CUSTOM_QUIZ: CUSTOM_QUIZ,
}


def get_flow(flow: WizardFlow) -> FlowConfig:
    return FLOWS[flow]
