"""
AI-assisted question drafting for the wizard form.

Splits the requested count across the requested question types and asks the
matching generator for each share. Drafts are returned to the form; they are
never written to the wizard store.
"""
import logging
from typing import List

from dashboard.generators import get_available_types
from dashboard.generators.factory import get_generator
from dashboard.models.session import WizardFlow
from dashboard.schemas import GenerateQuestionsRequest
from dashboard.services.llm_service import llm_service, GenerationUnavailable

logger = logging.getLogger(__name__)


class DraftGenerationError(Exception):
    """The LLM produced no usable questions."""


def split_count(total: int, buckets: int) -> List[int]:
    """Spread total over buckets as evenly as possible, earlier buckets first."""
    base, extra = divmod(total, buckets)
    return [base + (1 if i < extra else 0) for i in range(buckets)]


async def draft_questions(flow: WizardFlow, request: GenerateQuestionsRequest) -> list:
    if not llm_service.available:
        raise GenerationUnavailable("AI question drafting is not configured")

    allowed = get_available_types(flow)
    types = [t for t in dict.fromkeys(request.question_types) if t in allowed] or [allowed[0]]

    questions = []
    for question_type, count in zip(types, split_count(request.question_count, len(types))):
        if count == 0:
            continue
        generator = get_generator(question_type)
        drafted = await generator.generate(request, count)
        logger.info("Drafted %s/%s %s questions on %r", len(drafted), count, question_type.value, request.topic)
        questions.extend(drafted)

    if not questions:
        raise DraftGenerationError("Could not generate questions. Please try again.")
    return questions
