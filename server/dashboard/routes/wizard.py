"""
Custom exam / custom quiz wizard pages.

Each page is a GET that "mounts" it (returns its view, or redirects to the
upstream step when a prerequisite is missing) and a POST that submits it
(writes the page's store key and redirects to the next step).

    grade -> section -> students -> form -> confirmation
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse, RedirectResponse

from dashboard.config import settings
from dashboard.dependencies import get_institution_id, get_session_id, get_state_store
from dashboard.models.content import SUBJECT_OPTIONS
from dashboard.schemas import (
    ClassSection,
    CommitResult,
    ConfirmationView,
    CreatedResource,
    FormStepView,
    GenerateQuestionsRequest,
    GeneratedQuestionsResponse,
    GradeAndSection,
    GradeSelectRequest,
    GradeStepView,
    SectionSelectRequest,
    SectionStepView,
    SelectedStudents,
    StudentSelectRequest,
    StudentStepView,
)
from dashboard.services.backend_client import BackendClient, BackendError, get_backend_client
from dashboard.services.commit import CommitInProgress, CommitValidationError, TwoPhaseCommit
from dashboard.services.flows import (
    CONFIRMATION_STEP,
    FORM_STEP,
    GRADE_STEP,
    SECTION_STEP,
    STUDENTS_STEP,
    FlowConfig,
)
from dashboard.services.form_validation import validate_form
from dashboard.services.llm_service import GenerationUnavailable
from dashboard.services.question_drafts import DraftGenerationError, draft_questions
from dashboard.services.selection import SelectionError, filter_students, find_section, find_standard, resolve_selection
from dashboard.services.state_store import WizardStateStore
from dashboard.services.wizard_session import WizardSession

logger = logging.getLogger(__name__)

NOT_SELECTED = "Not selected"


def fetch_error(message: str) -> JSONResponse:
    """Error panel for a listing that could not be loaded. No retry is attempted."""
    return JSONResponse(status_code=502, content={"error": message})


def build_wizard_router(flow: FlowConfig) -> APIRouter:
    """Router with every wizard page of one flow (mount under flow.listing_url)."""
    router = APIRouter(tags=[f"Custom {flow.noun}"])
    FormModel = flow.form_model

    def get_wizard_session(store: WizardStateStore = Depends(get_state_store)) -> WizardSession:
        return WizardSession(store, flow)

    def get_commit(
        session: WizardSession = Depends(get_wizard_session),
        session_id: str = Depends(get_session_id),
        client: BackendClient = Depends(get_backend_client),
        institution_id=Depends(get_institution_id),
    ) -> TwoPhaseCommit:
        return TwoPhaseCommit(
            session,
            client,
            session_id,
            institution_id=institution_id,
            due_days=settings.quiz_due_days,
            redirect_delay_seconds=settings.redirect_delay_seconds,
        )

    def go_to(step: str) -> RedirectResponse:
        return RedirectResponse(flow.step_url(step), status_code=303)

    def missing_prerequisite(step: str, what: str) -> RedirectResponse:
        logger.info("%s missing, redirecting to %s", flow.key(what), flow.step_url(step))
        return go_to(step)

    # ------------------------------------------------------------------
    # Grade
    # ------------------------------------------------------------------

    @router.get("/grade", response_model=GradeStepView)
    async def grade_step(client: BackendClient = Depends(get_backend_client)):
        """List every standard of the institution as a selectable tile."""
        try:
            standards = await client.list_all_standards()
        except BackendError:
            return fetch_error("Failed to fetch standards")
        message = None if standards else "No grades available"
        return GradeStepView(standards=standards, message=message)

    @router.post("/grade")
    async def select_grade(
        request: GradeSelectRequest,
        session: WizardSession = Depends(get_wizard_session),
        client: BackendClient = Depends(get_backend_client),
    ):
        try:
            standards = await client.list_all_standards()
        except BackendError:
            return fetch_error("Failed to fetch standards")
        try:
            standard = find_standard(standards, request.standard_id)
        except SelectionError as e:
            raise HTTPException(status_code=404, detail=str(e))

        session.save_standard(standard)
        return go_to(SECTION_STEP)

    # ------------------------------------------------------------------
    # Section
    # ------------------------------------------------------------------

    @router.get("/section", response_model=SectionStepView)
    async def section_step(session: WizardSession = Depends(get_wizard_session)):
        standard = session.load_standard()
        if standard is None:
            return missing_prerequisite(GRADE_STEP, "SelectedStandard")

        message = None
        if not standard.sections:
            message = f"No sections available for {standard.name}. Please contact your administrator."
        return SectionStepView(standard=standard, sections=standard.sections, message=message)

    @router.post("/section")
    async def select_section(
        request: SectionSelectRequest,
        session: WizardSession = Depends(get_wizard_session),
    ):
        standard = session.load_standard()
        if standard is None:
            return missing_prerequisite(GRADE_STEP, "SelectedStandard")
        try:
            section = find_section(standard, request.section_id)
        except SelectionError as e:
            raise HTTPException(status_code=404, detail=str(e))

        session.save_grade_and_section(GradeAndSection(
            standard_name=standard.name,
            section_name=section.name,
            standard=standard,
            section=section,
        ))
        return go_to(STUDENTS_STEP)

    # ------------------------------------------------------------------
    # Students
    # ------------------------------------------------------------------

    @router.get("/students", response_model=StudentStepView)
    async def students_step(
        search: str = Query("", description="Filter by name or email"),
        session: WizardSession = Depends(get_wizard_session),
        client: BackendClient = Depends(get_backend_client),
    ):
        grade = session.load_grade_and_section()
        if grade is None:
            return missing_prerequisite(GRADE_STEP, "GradeAndSection")
        try:
            roster = await client.list_all_students(grade.standard_name, grade.section_name)
        except BackendError:
            return fetch_error("Failed to fetch students")

        visible = filter_students(roster, search)
        message = None
        if not roster:
            message = f"No students found in {grade.standard_name}, Section {grade.section_name}."
        elif not visible:
            message = f'No students match "{search}".'

        selected = session.load_selected_students()
        return StudentStepView(
            standard_name=grade.standard_name,
            section_name=grade.section_name,
            search=search,
            students=visible,
            total_count=len(roster),
            selected_student_ids=selected.student_ids if selected else [],
            message=message,
        )

    @router.post("/students")
    async def select_students(
        request: StudentSelectRequest,
        session: WizardSession = Depends(get_wizard_session),
        client: BackendClient = Depends(get_backend_client),
    ):
        grade = session.load_grade_and_section()
        if grade is None:
            return missing_prerequisite(GRADE_STEP, "GradeAndSection")
        try:
            roster = await client.list_all_students(grade.standard_name, grade.section_name)
        except BackendError:
            return fetch_error("Failed to fetch students")
        try:
            chosen = resolve_selection(roster, request.student_ids, request.select_all, request.search)
        except SelectionError as e:
            raise HTTPException(status_code=400, detail=str(e))

        session.save_selected_students(SelectedStudents(selected_students=chosen))
        return go_to(FORM_STEP)

    # ------------------------------------------------------------------
    # Form
    # ------------------------------------------------------------------

    @router.get("/form", response_model=FormStepView)
    async def form_step(session: WizardSession = Depends(get_wizard_session)):
        """The stored draft (so Edit restores it) or an empty one."""
        grade = session.load_grade_and_section()
        if grade is None:
            return missing_prerequisite(GRADE_STEP, "GradeAndSection")

        draft = session.load_form_data()
        has_draft = draft is not None
        if draft is None:
            draft = FormModel(class_section=ClassSection(standard_id=grade.standard.id, section_id=grade.section.id))
        return FormStepView(
            form_data=draft.model_dump(mode="json", by_alias=True),
            subject_options=SUBJECT_OPTIONS,
            has_draft=has_draft,
        )

    @router.post("/form")
    async def submit_form(form: FormModel, session: WizardSession = Depends(get_wizard_session)):
        grade = session.load_grade_and_section()
        if grade is None:
            return missing_prerequisite(GRADE_STEP, "GradeAndSection")

        problem = validate_form(form)
        if problem:
            raise HTTPException(status_code=422, detail=problem)

        if not form.class_section.standard_id:
            form.class_section = ClassSection(standard_id=grade.standard.id, section_id=grade.section.id)
        session.save_form_data(form)
        return go_to(CONFIRMATION_STEP)

    @router.post("/form/generate", response_model=GeneratedQuestionsResponse)
    async def generate_form_questions(request: GenerateQuestionsRequest):
        """Draft questions with AI. The draft is returned, not stored."""
        try:
            questions = await draft_questions(flow.flow, request)
        except GenerationUnavailable as e:
            raise HTTPException(status_code=503, detail=str(e))
        except DraftGenerationError as e:
            raise HTTPException(status_code=502, detail=str(e))
        return GeneratedQuestionsResponse(questions=questions)

    # ------------------------------------------------------------------
    # Confirmation
    # ------------------------------------------------------------------

    @router.get("/confirmation", response_model=ConfirmationView)
    async def confirmation_step(
        session: WizardSession = Depends(get_wizard_session),
        commit: TwoPhaseCommit = Depends(get_commit),
    ):
        form = session.load_form_data()
        if form is None:
            return missing_prerequisite(FORM_STEP, "FormData")

        grade = session.load_grade_and_section()
        selected = session.load_selected_students()
        students = list(selected.selected_students) if selected else []
        state = commit.current_state()

        return ConfirmationView(
            resource=CreatedResource.preview(form, resource_id=state.resource_id),
            grade_and_section=grade,
            grade_label=grade.standard_name if grade else NOT_SELECTED,
            section_label=grade.section_name if grade else NOT_SELECTED,
            selected_students=students,
            phase=state.phase,
            message=state.message,
            can_confirm=bool(students) and not commit.in_progress,
        )

    @router.post("/confirmation/confirm", response_model=CommitResult)
    async def confirm(commit: TwoPhaseCommit = Depends(get_commit)):
        """Create the exam/quiz, then assign it to the selected students."""
        try:
            result = await commit.confirm()
        except CommitInProgress as e:
            raise HTTPException(status_code=409, detail=str(e))
        except CommitValidationError as e:
            raise HTTPException(status_code=400, detail=str(e))

        content = result.model_dump(mode="json", by_alias=True)
        if not result.success:
            return JSONResponse(status_code=502, content=content)
        return JSONResponse(
            status_code=200,
            content=content,
            headers={"Refresh": f"{result.redirect_delay_seconds}; url={result.redirect}"},
        )

    @router.post("/confirmation/cancel")
    async def cancel(session: WizardSession = Depends(get_wizard_session)):
        """Abandon the wizard whatever phase it reached."""
        session.clear()
        return RedirectResponse(flow.listing_url, status_code=303)

    @router.post("/confirmation/edit")
    async def edit():
        """Back to the form; the stored draft is kept."""
        return go_to(FORM_STEP)

    return router
