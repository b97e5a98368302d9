"""Recommendation schemas."""

from pydantic import BaseModel, Field


class RecommendationResponse(BaseModel):
    id: str
    title: str
    description: str
    category: str
    difficulty: str
    duration: str
    icon: str
    url: str
    platform: str
    progress: int = 0
    completed: bool = False


class RecommendationListResponse(BaseModel):
    recommendations: list[RecommendationResponse]
    total: int


class ProgressUpdate(BaseModel):
    progress: int = Field(ge=0, le=100)
