"""Dashboard schemas: category performance and statistics."""

from pydantic import BaseModel


class SkillScore(BaseModel):
    name: str
    score: int


class CategoryPerformance(BaseModel):
    title: str
    score: int
    change: int
    tests: int
    last_test: str  # ISO date or "N/A"
    skills: list[SkillScore]


class CategoryPerformanceResponse(BaseModel):
    categories: list[CategoryPerformance]


class CategoryScore(BaseModel):
    name: str
    score: int


class SkillBucket(BaseModel):
    category: str
    count: int


class StatisticsResponse(BaseModel):
    time_range: str
    total_tests: int
    average_score: int
    best_category: CategoryScore
    worst_category: CategoryScore
    improvement: int
    skills_distribution: list[SkillBucket]
