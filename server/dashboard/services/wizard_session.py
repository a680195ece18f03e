"""
Typed access to the wizard keys of one flow.

Every value is stored as a versioned record:

    {"version": 1, "kind": "GradeAndSection", "data": {...}}

A record that is missing, not JSON, from another version or kind, or that no
longer matches its schema reads as None, exactly like an absent key.
"""
import json
import logging
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from dashboard.schemas import CommitState, GradeAndSection, SelectedStudents, Standard, WizardFormData
from dashboard.services.flows import (
    COMMIT_STATE,
    FORM_DATA,
    GRADE_AND_SECTION,
    KEY_ORDER,
    SELECTED_STANDARD,
    SELECTED_STUDENTS,
    FlowConfig,
)
from dashboard.services.state_store import WizardStateStore

logger = logging.getLogger(__name__)

RECORD_VERSION = 1

M = TypeVar("M", bound=BaseModel)


class WizardSession:
    """One flow's view of the cross-page store."""

    def __init__(self, store: WizardStateStore, flow: FlowConfig):
        self.store = store
        self.flow = flow

    # ------------------------------------------------------------------
    # Record encoding
    # ------------------------------------------------------------------

    def _read_data(self, name: str) -> Optional[dict]:
        key = self.flow.key(name)
        raw = self.store.get(key)
        if raw is None:
            return None
        try:
            record = json.loads(raw)
        except ValueError:
            logger.warning("Discarding unparsable value for %s", key)
            return None
        if not isinstance(record, dict) or record.get("version") != RECORD_VERSION or record.get("kind") != name:
            logger.warning("Discarding %s: unexpected record version or kind", key)
            return None
        return record.get("data")

    def _read(self, name: str, model: Type[M]) -> Optional[M]:
        data = self._read_data(name)
        if data is None:
            return None
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning("Discarding %s: %s", self.flow.key(name), e.errors()[:1])
            return None

    def _write(self, name: str, value: BaseModel) -> None:
        data = value.model_dump(mode="json", by_alias=True)
        if self._read_data(name) != data:
            self._invalidate_after(name)
        self.store.set(self.flow.key(name), {"version": RECORD_VERSION, "kind": name, "data": data})

    def _invalidate_after(self, name: str) -> None:
        downstream = KEY_ORDER[KEY_ORDER.index(name) + 1:]
        stale = [self.flow.key(n) for n in downstream if self.store.get(self.flow.key(n)) is not None]
        if stale:
            logger.info("%s changed, clearing %s", self.flow.key(name), ", ".join(stale))
            self.store.clear(stale)

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def load_standard(self) -> Optional[Standard]:
        return self._read(SELECTED_STANDARD, Standard)

    def save_standard(self, standard: Standard) -> None:
        self._write(SELECTED_STANDARD, standard)

    def load_grade_and_section(self) -> Optional[GradeAndSection]:
        return self._read(GRADE_AND_SECTION, GradeAndSection)

    def save_grade_and_section(self, value: GradeAndSection) -> None:
        self._write(GRADE_AND_SECTION, value)

    def load_selected_students(self) -> Optional[SelectedStudents]:
        return self._read(SELECTED_STUDENTS, SelectedStudents)

    def save_selected_students(self, value: SelectedStudents) -> None:
        self._write(SELECTED_STUDENTS, value)

    def load_form_data(self) -> Optional[WizardFormData]:
        return self._read(FORM_DATA, self.flow.form_model)

    def save_form_data(self, value: WizardFormData) -> None:
        self._write(FORM_DATA, value)

    def load_commit_state(self) -> Optional[CommitState]:
        return self._read(COMMIT_STATE, CommitState)

    def save_commit_state(self, value: CommitState) -> None:
        self._write(COMMIT_STATE, value)

    def clear(self) -> None:
        """Forget every key of this flow. Safe when nothing is stored."""
        self.store.clear(self.flow.all_keys)
