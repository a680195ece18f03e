"""
Short / Long Answer Draft Generators.
"""
from typing import List

from dashboard.generators.base import BaseQuestionGenerator
from dashboard.generators.schemas import GenOpenEndedBatch
from dashboard.schemas import GenerateQuestionsRequest, OpenEndedQuestion


class OpenEndedGenerator(BaseQuestionGenerator):
    """Generator for answer-in-words questions."""

    prompt_name = "open_ended_drafts"

    def __init__(self, question_type: str):
        self.question_type = question_type

    async def generate(self, request: GenerateQuestionsRequest, count: int) -> List[OpenEndedQuestion]:
        batch = await self._generate_structured(request, count, GenOpenEndedBatch)
        if batch is None:
            return []
        return [
            OpenEndedQuestion(
                question_type=self.question_type,
                question_text=draft.question_text,
                correct_answer=draft.correct_answer,
                marks=draft.marks,
                bloom_taxonomy=request.bloom_taxonomy.value,
            )
            for draft in batch.questions[:count]
            if draft.correct_answer.strip()
        ]


# Singleton instances
short_answer_generator = OpenEndedGenerator("SHORT")
long_answer_generator = OpenEndedGenerator("LONG")
