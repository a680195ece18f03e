"""
Models package initialization
Enumerations shared by schemas, services and routes
"""

from dashboard.models.content import QuestionType, Difficulty, BloomLevel, SUBJECT_OPTIONS
from dashboard.models.session import WizardFlow, CommitPhase

__all__ = [
    "QuestionType",
    "Difficulty",
    "BloomLevel",
    "SUBJECT_OPTIONS",
    "WizardFlow",
    "CommitPhase",
]
