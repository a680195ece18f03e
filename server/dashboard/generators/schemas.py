"""
Question Draft Schemas.

Structured-output models the LLM fills in. They carry no question type; the
generator that asked for them converts each draft into a form question
(McqQuestion / OpenEndedQuestion) with the type injected.

IMPORTANT: correct_options uses 0-based indices into options, not letters.
"""
from typing import List
from pydantic import BaseModel, Field


class GenMcqQuestion(BaseModel):
    question_text: str
    options: List[str]
    correct_options: List[int]  # 0-based indices
    marks: int = 1


class GenOpenEndedQuestion(BaseModel):
    question_text: str
    correct_answer: str  # reference answer used for grading
    marks: int = 1


class GenMcqBatch(BaseModel):
    questions: List[GenMcqQuestion] = Field(default_factory=list)


class GenOpenEndedBatch(BaseModel):
    questions: List[GenOpenEndedQuestion] = Field(default_factory=list)
