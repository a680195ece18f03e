"""
Question Draft Generators Package.

Generators that draft form questions with an LLM:
- MCQ: multiple choice with one or more correct options
- SHORT: short answer with a reference answer
- LONG: long answer with a reference answer

The custom quiz wizard only accepts multiple choice questions.
"""
from typing import List

from dashboard.models.content import QuestionType
from dashboard.models.session import WizardFlow

# Flow to question types a draft may contain
FLOW_QUESTION_TYPES: dict[WizardFlow, List[QuestionType]] = {
    WizardFlow.CUSTOM_EXAM: [QuestionType.MCQ, QuestionType.SHORT, QuestionType.LONG],
    WizardFlow.CUSTOM_QUIZ: [QuestionType.MCQ],
}


def get_available_types(flow: WizardFlow) -> List[QuestionType]:
    """Get the question types a flow's form accepts."""
    return FLOW_QUESTION_TYPES.get(flow, [QuestionType.MCQ])
