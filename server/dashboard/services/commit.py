"""
Create-then-assign commit for the confirmation page.

    READY -> CREATING -> CREATE_FAILED | CREATED
    CREATED -> ASSIGNING -> ASSIGN_FAILED | ASSIGNED

The assignment call is only issued after the create call has returned a
success envelope. When assignment fails the created resource id is kept in the
commit record so the next confirm only retries the assignment.
"""
import asyncio
import logging
from typing import Dict, Optional, Tuple

from dashboard.models.session import CommitPhase
from dashboard.schemas import CommitResult, CommitState, SelectedStudents
from dashboard.services.backend_client import BackendClient, BackendError
from dashboard.services.wizard_session import WizardSession

logger = logging.getLogger(__name__)


class CommitInProgress(Exception):
    """A confirm is already running for this wizard session."""


class CommitValidationError(Exception):
    """The wizard state cannot be committed; nothing was sent to the backend."""


# (session id, flow) -> lock held while a confirm runs; dropped when it finishes
_commit_locks: Dict[Tuple[str, str], asyncio.Lock] = {}


def get_commit_lock(session_id: str, flow_name: str) -> asyncio.Lock:
    key = (session_id, flow_name)
    if key not in _commit_locks:
        _commit_locks[key] = asyncio.Lock()
    return _commit_locks[key]


def is_commit_running(session_id: str, flow_name: str) -> bool:
    lock = _commit_locks.get((session_id, flow_name))
    return lock is not None and lock.locked()


def discard_commit_lock(session_id: str, flow_name: str) -> None:
    lock = _commit_locks.get((session_id, flow_name))
    if lock is not None and not lock.locked():
        del _commit_locks[(session_id, flow_name)]


class TwoPhaseCommit:
    """Runs (or resumes after a failed assignment) the create/assign pair."""

    def __init__(
        self,
        session: WizardSession,
        client: BackendClient,
        session_id: str,
        institution_id: Optional[str] = None,
        due_days: int = 7,
        redirect_delay_seconds: int = 2,
    ):
        self.session = session
        self.flow = session.flow
        self.client = client
        self.session_id = session_id
        self.institution_id = institution_id
        self.due_days = due_days
        self.redirect_delay_seconds = redirect_delay_seconds

    @property
    def in_progress(self) -> bool:
        return is_commit_running(self.session_id, self.flow.flow.value)

    def current_state(self) -> CommitState:
        state = self.session.load_commit_state() or CommitState()
        if state.phase.in_flight and not self.in_progress:
            # Left behind by an interrupted commit; resuming is not supported
            phase = CommitPhase.CREATED if state.resource_id else CommitPhase.READY
            state = CommitState(phase=phase, resource_id=state.resource_id)
        return state

    def _save(self, phase: CommitPhase, resource_id: Optional[str] = None, message: Optional[str] = None) -> None:
        logger.info("%s commit -> %s (resource=%s)", self.flow.flow.value, phase.value, resource_id)
        self.session.save_commit_state(CommitState(phase=phase, resource_id=resource_id, message=message))

    async def confirm(self) -> CommitResult:
        lock = get_commit_lock(self.session_id, self.flow.flow.value)
        # No await between the check and the acquire, so this cannot interleave
        if lock.locked():
            raise CommitInProgress(f"{self.flow.noun} is already being created and assigned")
        try:
            async with lock:
                return await self._run()
        finally:
            discard_commit_lock(self.session_id, self.flow.flow.value)

    def _validate(self) -> SelectedStudents:
        noun = self.flow.noun.lower()
        form = self.session.load_form_data()
        students = self.session.load_selected_students()
        if form is None or students is None or not students.selected_students:
            raise CommitValidationError(f"Missing {noun} data or no students selected")
        if self.flow.requires_institution and not self.institution_id:
            raise CommitValidationError("Institution information not available")
        return students

    async def _run(self) -> CommitResult:
        students = self._validate()
        noun = self.flow.noun

        resource_id = self.current_state().resource_id
        if resource_id is None:
            # Fresh snapshot of the draft, taken at confirm time
            form = self.session.load_form_data()
            self._save(CommitPhase.CREATING)
            try:
                created = await self.flow.create(self.client, self.flow.build_create_payload(form))
            except BackendError as e:
                self._save(CommitPhase.CREATE_FAILED, message=e.message)
                return CommitResult(success=False, phase=CommitPhase.CREATE_FAILED, message=e.message)

            resource_id = self.flow.extract_resource_id(created)
            if resource_id is None:
                message = f"Failed to create {noun.lower()}: no {self.flow.id_field} returned"
                self._save(CommitPhase.CREATE_FAILED, message=message)
                return CommitResult(success=False, phase=CommitPhase.CREATE_FAILED, message=message)
            self._save(CommitPhase.CREATED, resource_id)
        else:
            logger.info("Retrying assignment of existing %s %s", noun.lower(), resource_id)

        self._save(CommitPhase.ASSIGNING, resource_id)
        payload = self.flow.build_assign_payload(
            resource_id,
            students.student_ids,
            institution_id=self.institution_id,
            due_days=self.due_days,
        )
        try:
            assigned = await self.flow.assign(self.client, payload)
        except BackendError as e:
            message = f"{noun} was created but could not be assigned: {e.message}"
            self._save(CommitPhase.ASSIGN_FAILED, resource_id, message)
            return CommitResult(
                success=False,
                phase=CommitPhase.ASSIGN_FAILED,
                message=message,
                resource_id=resource_id,
            )

        raw_count = assigned.get(self.flow.assigned_count_field)
        try:
            count = int(raw_count)
        except (TypeError, ValueError):
            logger.warning(
                "Assign response has no usable %s (%r); using selection size",
                self.flow.assigned_count_field,
                raw_count,
            )
            count = len(students.student_ids)

        self.session.clear()
        logger.info("%s %s assigned to %s students", noun, resource_id, count)
        return CommitResult(
            success=True,
            phase=CommitPhase.ASSIGNED,
            message=f"{noun} created and assigned successfully to {count} students",
            resource_id=resource_id,
            assigned_count=count,
            redirect=self.flow.listing_url,
            redirect_delay_seconds=self.redirect_delay_seconds,
        )
