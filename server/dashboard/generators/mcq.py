"""
Multiple Choice Draft Generator.
"""
import logging
import random
from typing import List

from dashboard.generators.base import BaseQuestionGenerator
from dashboard.generators.schemas import GenMcqBatch, GenMcqQuestion
from dashboard.schemas import GenerateQuestionsRequest, McqQuestion, Option

logger = logging.getLogger(__name__)


class McqGenerator(BaseQuestionGenerator):
    """Generator for multiple choice questions."""

    question_type = "MCQ"
    prompt_name = "mcq_drafts"

    def _shuffle_options(self, draft: GenMcqQuestion) -> List[Option]:
        """Shuffle options so the correct answer does not sit in a fixed slot."""
        correct = set(draft.correct_options)
        options = [
            Option(option_text=text, is_correct=index in correct)
            for index, text in enumerate(draft.options)
        ]
        random.shuffle(options)
        return options

    async def generate(self, request: GenerateQuestionsRequest, count: int) -> List[McqQuestion]:
        batch = await self._generate_structured(request, count, GenMcqBatch)
        if batch is None:
            return []

        questions = []
        for draft in batch.questions[:count]:
            if not any(0 <= i < len(draft.options) for i in draft.correct_options):
                logger.warning("Dropping MCQ draft without a valid correct option: %s", draft.question_text[:60])
                continue
            questions.append(McqQuestion(
                question_text=draft.question_text,
                marks=draft.marks,
                bloom_taxonomy=request.bloom_taxonomy.value,
                options=self._shuffle_options(draft),
            ))
        return questions


# Singleton instance
mcq_generator = McqGenerator()
