"""Test catalog and submission schemas."""

from typing import Optional
from pydantic import BaseModel


class OptionResponse(BaseModel):
    id: str
    text: str


class QuestionResponse(BaseModel):
    index: int
    question: str
    options: list[OptionResponse]


class TestSummary(BaseModel):
    id: str
    title: str
    description: str
    duration: str
    category: str
    icon: str
    difficulty: str
    question_count: int


class TestDetail(TestSummary):
    questions: list[QuestionResponse]


class SubmissionRequest(BaseModel):
    answers: dict[int, str] = {}  # question index -> option id


class TestResultResponse(BaseModel):
    id: str
    test_id: str
    name: str
    category: str
    score: int
    answers: dict[int, str]
    date: str

    class Config:
        from_attributes = True


class SubmissionResponse(BaseModel):
    test_id: str
    category: str
    score: int
    correct_count: int
    total_count: int
    saved: bool
    level: Optional[str] = None
    result: Optional[TestResultResponse] = None
