import enum


class WizardFlow(str, enum.Enum):
    """The two wizard flows. Values are the URL prefixes."""
    CUSTOM_EXAM = "custom-exam"
    CUSTOM_QUIZ = "custom-quiz"


class CommitPhase(str, enum.Enum):
    """Phases of the create-then-assign commit on the confirmation page."""
    READY = "ready"
    CREATING = "creating"
    CREATE_FAILED = "create_failed"
    CREATED = "created"
    ASSIGNING = "assigning"
    ASSIGN_FAILED = "assign_failed"
    ASSIGNED = "assigned"

    @property
    def in_flight(self) -> bool:
        return self in (CommitPhase.CREATING, CommitPhase.ASSIGNING)
