"""Skill and progress schemas."""

from pydantic import BaseModel


class SkillResponse(BaseModel):
    name: str
    category: str
    score: int

    class Config:
        from_attributes = True


class SkillListResponse(BaseModel):
    skills: list[SkillResponse]


class ProgressResponse(BaseModel):
    overall: int
    categories: dict[str, int]
    last_updated: str
