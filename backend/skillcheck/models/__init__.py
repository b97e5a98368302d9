"""SQLAlchemy ORM models."""

from skillcheck.models.user import User
from skillcheck.models.test import Test, TestQuestion
from skillcheck.models.test_result import TestResult
from skillcheck.models.skill import Skill
from skillcheck.models.category_progress import CategoryProgress
from skillcheck.models.recommendation import Recommendation, RecommendationProgress
from skillcheck.models.user_cv import UserCV

__all__ = [
    "User",
    "Test",
    "TestQuestion",
    "TestResult",
    "Skill",
    "CategoryProgress",
    "Recommendation",
    "RecommendationProgress",
    "UserCV",
]
