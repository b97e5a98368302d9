"""Skill aggregator: spreads a test score over the skills of its category."""

import logging

from sqlalchemy.orm import Session

from skillcheck.models.skill import Skill
from skillcheck.models.test_result import TestResult
from skillcheck.scoring import blend, clamp, position_contribution
from skillcheck.services import store

logger = logging.getLogger(__name__)

# Ordered most-central first; position drives the decay of each skill's share.
CATEGORY_SKILLS: dict[str, list[str]] = {
    "Frontend": ["HTML", "CSS", "JavaScript", "React"],
    "Backend": ["Node.js", "Express", "REST APIs", "Authentication"],
    "Databases": ["SQL", "Data Modeling", "Query Optimization", "NoSQL"],
    "Algorithms": ["Data Structures", "Sorting", "Searching", "Complexity"],
    "DevOps": ["Git", "Docker", "CI/CD", "Deployment"],
}

CV_CATEGORY = "CV"
CV_SKILL_START = 60
CV_SKILL_STEP = 5


def skills_for_category(category: str) -> list[str]:
    """Skill names for `category`; empty (and logged) when the table lacks it."""
    names = CATEGORY_SKILLS.get(category)
    if not names:
        logger.warning("No skill table entry for category %r; skipping skill update", category)
        return []
    if not all(isinstance(n, str) and n for n in names):
        logger.warning("Malformed skill table entry for category %r; skipping skill update", category)
        return []
    return names


def merge_result(skills: list[Skill], category: str, score: int) -> list[Skill]:
    """Blend a category score into `skills` in place and return the list.

    Existing (name, category) skills are blended; missing ones are appended.
    """
    by_name = {s.name: s for s in skills if s.category == category}
    for idx, name in enumerate(skills_for_category(category)):
        contribution = position_contribution(score, idx)
        existing = by_name.get(name)
        if existing is not None:
            existing.score = blend(existing.score, contribution)
        else:
            skill = Skill(name=name, category=category, score=blend(None, contribution))
            skills.append(skill)
            by_name[name] = skill
    return skills


def apply_result(db: Session, result: TestResult) -> list[Skill]:
    """Update the result owner's skills from one scored attempt."""
    skills = store.get_skills(db, result.user_id)
    if not skills_for_category(result.category):
        return skills
    merge_result(skills, result.category, result.score)
    return store.save_skills(db, result.user_id, skills)


def apply_cv_skills(db: Session, user_id: str, names: list[str]) -> list[Skill]:
    """Credit skills detected in a CV.

    Known CV skills (case-insensitive) gain a few points, capped at 100;
    new ones start at a fixed score.
    """
    skills = store.get_skills(db, user_id)
    if not names:
        return skills
    cv_skills = {s.name.lower(): s for s in skills if s.category == CV_CATEGORY}
    for name in names:
        existing = cv_skills.get(name.lower())
        if existing is not None:
            existing.score = clamp(existing.score + CV_SKILL_STEP)
        else:
            skill = Skill(name=name, category=CV_CATEGORY, score=CV_SKILL_START)
            skills.append(skill)
            cv_skills[name.lower()] = skill
    return store.save_skills(db, user_id, skills)


def list_skills(db: Session, user_id: str) -> list[Skill]:
    return store.get_skills(db, user_id)
