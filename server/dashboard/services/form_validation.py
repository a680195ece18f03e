"""
Form-stage checks run before a draft is handed to the confirmation page.
"""
from typing import Optional

from dashboard.schemas import McqQuestion, OpenEndedQuestion, WizardFormData


def validate_form(form: WizardFormData) -> Optional[str]:
    """Return the first problem found, or None when the draft can be reviewed."""
    if not form.questions:
        return "Please add at least one question"

    for number, question in enumerate(form.questions, start=1):
        if not question.question_text.strip():
            return f"Question {number} text is required"
        if isinstance(question, McqQuestion):
            if not question.options:
                return f"Question {number} needs answer options"
            if not any(option.is_correct for option in question.options):
                return f"Question {number} must have at least one correct answer"
            if any(not option.option_text.strip() for option in question.options):
                return f"Question {number} has empty options"
        elif isinstance(question, OpenEndedQuestion) and not question.correct_answer.strip():
            return f"Question {number} must have a correct answer"
    return None
