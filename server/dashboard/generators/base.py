"""
Base Generator Class.

Provides common functionality for all question draft generators.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Type, TypeVar

from pydantic import BaseModel

from dashboard.schemas import GenerateQuestionsRequest
from dashboard.services.prompt_management import get_prompt

logger = logging.getLogger(__name__)

B = TypeVar("B", bound=BaseModel)


class BaseQuestionGenerator(ABC):
    """Abstract base class for question draft generators."""

    # Question type identifier - must be overridden
    question_type: str = "base"

    # Prompt file name under prompts/
    prompt_name: str = "base"

    @abstractmethod
    async def generate(self, request: GenerateQuestionsRequest, count: int) -> List[BaseModel]:
        """
        Draft `count` questions for the request.

        Returns:
            Form questions (possibly fewer than asked for); empty on failure
        """

    def build_prompts(self, request: GenerateQuestionsRequest, count: int) -> tuple[str, str]:
        """Render the system and user prompts for this question type."""
        prompt = get_prompt(
            self.prompt_name,
            count=count,
            topic=request.topic,
            subject=request.subject or "General",
            bloom_taxonomy=request.bloom_taxonomy.value,
            question_type=self.question_type,
        )
        user_prompt = prompt["human_prompt"]
        if request.instructions:
            user_prompt += f"\n\nTeacher instructions:\n{request.instructions}"
        return prompt["system_prompt"], user_prompt

    async def _generate_structured(
        self,
        request: GenerateQuestionsRequest,
        count: int,
        response_model: Type[B],
    ) -> Optional[B]:
        """Ask the LLM for a batch matching response_model."""
        from dashboard.services.llm_service import llm_service

        system_prompt, user_prompt = self.build_prompts(request, count)
        result = await llm_service.generate_response(
            response_model=response_model,
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            temperature=request.temperature,
        )
        if result is None:
            logger.error("LLM returned no %s drafts", self.question_type)
        return result
