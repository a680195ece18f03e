"""
Structured LLM Service.

Encapsulates OpenAI's structured output capabilities.
"""
import logging
from typing import Type, TypeVar, Optional
from pydantic import BaseModel
from openai import AsyncOpenAI, OpenAIError
from dashboard.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class GenerationUnavailable(Exception):
    """No OpenAI API key is configured."""


class StructuredLLMService:
    """Service for generating structured outputs from LLMs."""

    def __init__(self):
        self._client: Optional[AsyncOpenAI] = None
        self.model = settings.openai_model

    @property
    def available(self) -> bool:
        return bool(settings.openai_api_key)

    @property
    def client(self) -> AsyncOpenAI:
        if not self.available:
            raise GenerationUnavailable("AI question drafting is not configured")
        if self._client is None:
            self._client = AsyncOpenAI(api_key=settings.openai_api_key)
        return self._client

    async def generate_response(
        self,
        response_model: Type[T],
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 4000
    ) -> Optional[T]:
        """
        Generate a structured response ensuring it matches the Pydantic model.
        Returns None when the call fails or the model refuses.
        """
        client = self.client
        try:
            completion = await client.chat.completions.parse(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                response_format=response_model,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except OpenAIError as e:
            logger.error("Structured LLM generation error: %s", e)
            return None

        return completion.choices[0].message.parsed


# Singleton instance
llm_service = StructuredLLMService()
