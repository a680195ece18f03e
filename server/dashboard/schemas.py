from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict, Union, Literal, Any, Generic, TypeVar, Annotated
from dashboard.models.content import BloomLevel, Difficulty, QuestionType
from dashboard.models.session import CommitPhase


T = TypeVar("T")


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Institution backend schemas
# =============================================================================

class Section(CamelModel):
    id: str
    name: str
    created_at: Optional[str] = None


class Standard(CamelModel):
    id: str
    name: str
    institution_id: Optional[str] = None
    sections: List[Section] = []


class Student(CamelModel):
    id: str
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    dob: Optional[str] = None
    gender: Optional[str] = None
    phone: Optional[str] = None
    photo_url: Optional[str] = None
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Pagination(CamelModel):
    current_page: int
    total_pages: int
    total_count: int = 0
    limit: int = 0


class StandardsPage(CamelModel):
    standards: List[Standard] = []
    pagination: Pagination


class StudentsPage(CamelModel):
    students: List[Student] = []
    pagination: Pagination


class BackendEnvelope(CamelModel, Generic[T]):
    """Response envelope shared by every backend endpoint."""
    status_code: Optional[int] = None
    success: bool = False
    message: str = ""
    data: Optional[T] = None


# =============================================================================
# Wizard state (values kept in the cross-page store)
# =============================================================================

class GradeAndSection(CamelModel):
    standard_name: str
    section_name: str
    standard: Standard
    section: Section


class SelectedStudents(CamelModel):
    """Students chosen on the student step. Immutable once written."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    selected_students: List[Student]

    @property
    def student_ids(self) -> List[str]:
        return [student.id for student in self.selected_students]


class ClassSection(CamelModel):
    standard_id: str = ""
    section_id: str = ""


class Option(CamelModel):
    option_text: str = ""
    is_correct: bool = False


class BaseQuestion(CamelModel):
    question_text: str = ""
    marks: int = Field(default=1, ge=0)
    bloom_taxonomy: str = BloomLevel.REMEMBER.value


class McqQuestion(BaseQuestion):
    """Multiple choice: graded by its options."""
    question_type: Literal["MCQ"] = "MCQ"
    options: List[Option] = []


class OpenEndedQuestion(BaseQuestion):
    """Short or long answer: graded against a reference answer."""
    question_type: Literal["SHORT", "LONG"]
    correct_answer: str = ""


Question = Annotated[Union[McqQuestion, OpenEndedQuestion], Field(discriminator="question_type")]


class ResourceDetails(CamelModel):
    title: str = ""
    subject: str = ""
    topic: str = ""
    time_limit_minutes: int = Field(default=60, ge=1)
    instructions: str = ""
    difficulty: Optional[Difficulty] = None


class ExamDetails(ResourceDetails):
    pass


class QuizDetails(ResourceDetails):
    time_limit_minutes: int = Field(default=30, ge=1)
    difficulty: Difficulty = Difficulty.MEDIUM


class ExamFormData(CamelModel):
    exam_details: ExamDetails = Field(default_factory=ExamDetails)
    description: str = ""
    class_section: ClassSection = Field(default_factory=ClassSection)
    questions: List[Question] = []

    @property
    def details(self) -> ResourceDetails:
        return self.exam_details


class QuizFormData(CamelModel):
    quiz_details: QuizDetails = Field(default_factory=QuizDetails)
    description: str = ""
    class_section: ClassSection = Field(default_factory=ClassSection)
    questions: List[McqQuestion] = []

    @property
    def details(self) -> ResourceDetails:
        return self.quiz_details


WizardFormData = Union[ExamFormData, QuizFormData]


class CreatedResource(CamelModel):
    """Summary of the exam/quiz under review; resource_id is set once created."""
    resource_id: Optional[str] = None
    title: str
    subject: str
    topic: str
    time_limit_minutes: int
    instructions: str
    difficulty: Optional[str] = None
    question_count: int

    @classmethod
    def preview(cls, form: WizardFormData, resource_id: Optional[str] = None) -> "CreatedResource":
        details = form.details
        return cls(
            resource_id=resource_id,
            title=details.title,
            subject=details.subject,
            topic=details.topic,
            time_limit_minutes=details.time_limit_minutes,
            instructions=details.instructions,
            difficulty=details.difficulty.value if details.difficulty else None,
            question_count=len(form.questions),
        )


class CommitState(CamelModel):
    """Progress of the create-then-assign commit for one wizard run."""
    phase: CommitPhase = CommitPhase.READY
    resource_id: Optional[str] = None
    message: Optional[str] = None


# =============================================================================
# Request bodies
# =============================================================================

class GradeSelectRequest(CamelModel):
    standard_id: str


class SectionSelectRequest(CamelModel):
    section_id: str


class StudentSelectRequest(CamelModel):
    student_ids: List[str] = []
    select_all: bool = False
    search: str = ""


class GenerateQuestionsRequest(CamelModel):
    """Ask the AI drafting service for questions to seed the form."""
    topic: str
    subject: str = ""
    instructions: str = ""
    question_count: int = Field(ge=1, le=20, default=5)
    question_types: List[QuestionType] = [QuestionType.MCQ]
    bloom_taxonomy: BloomLevel = BloomLevel.REMEMBER
    temperature: float = 0.7


# =============================================================================
# Page views
# =============================================================================

class GradeStepView(CamelModel):
    standards: List[Standard]
    message: Optional[str] = None


class SectionStepView(CamelModel):
    standard: Standard
    sections: List[Section]
    message: Optional[str] = None


class StudentStepView(CamelModel):
    standard_name: str
    section_name: str
    search: str = ""
    students: List[Student]
    total_count: int
    selected_student_ids: List[str] = []
    message: Optional[str] = None


class FormStepView(CamelModel):
    form_data: Dict[str, Any]
    subject_options: List[str]
    has_draft: bool = False


class ConfirmationView(CamelModel):
    resource: CreatedResource
    grade_and_section: Optional[GradeAndSection] = None
    grade_label: str
    section_label: str
    selected_students: List[Student] = []
    phase: CommitPhase = CommitPhase.READY
    message: Optional[str] = None
    can_confirm: bool = True


class CommitResult(CamelModel):
    success: bool
    phase: CommitPhase
    message: str
    resource_id: Optional[str] = None
    assigned_count: Optional[int] = None
    redirect: Optional[str] = None
    redirect_delay_seconds: Optional[int] = None


class GeneratedQuestionsResponse(CamelModel):
    questions: List[Question]
