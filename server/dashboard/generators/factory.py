"""
Generator Factory.

Provides centralized access to all question draft generators.
"""
from typing import Optional
from dashboard.models.content import QuestionType
from dashboard.generators.base import BaseQuestionGenerator
from dashboard.generators.mcq import mcq_generator
from dashboard.generators.open_ended import short_answer_generator, long_answer_generator


# Map question type to generator instance
GENERATORS: dict[QuestionType, BaseQuestionGenerator] = {
    QuestionType.MCQ: mcq_generator,
    QuestionType.SHORT: short_answer_generator,
    QuestionType.LONG: long_answer_generator,
}


def get_generator(question_type: QuestionType) -> Optional[BaseQuestionGenerator]:
    """Get the generator for a question type."""
    return GENERATORS.get(question_type)
