"""Level classifier: coarse proficiency tier from scores and test count."""

import logging
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from skillcheck.errors import NotFoundError
from skillcheck.models.user import LEVEL_ADVANCED, LEVEL_BEGINNER, LEVEL_INTERMEDIATE
from skillcheck.scoring import mean
from skillcheck.services import store

logger = logging.getLogger(__name__)

# (level, minimum tests, minimum mean test score, minimum mean skill score),
# checked in order; the first satisfied rule wins.
LEVEL_RULES = [
    (LEVEL_ADVANCED, 5, 70, 70),
    (LEVEL_INTERMEDIATE, 3, 50, 50),
]


def classify(test_scores: Sequence[float], skill_scores: Sequence[float]) -> Optional[str]:
    """Tier for the given scores, or None when either sequence is empty."""
    if not test_scores or not skill_scores:
        return None
    avg_test = mean(test_scores)
    avg_skill = mean(skill_scores)
    for level, min_tests, min_test_avg, min_skill_avg in LEVEL_RULES:
        if len(test_scores) >= min_tests and avg_test >= min_test_avg and avg_skill >= min_skill_avg:
            return level
    return LEVEL_BEGINNER


def reclassify(db: Session, user_id: str) -> str:
    """Recompute and store the user's level.

    Leaves the level untouched when the user has no skills or no results.
    Otherwise the level is written even when it did not change.
    """
    user = store.get_user(db, user_id)
    if user is None:
        raise NotFoundError("User not found")

    skills = store.get_skills(db, user_id)
    results = store.list_test_results(db, user_id)
    level = classify([r.score for r in results], [s.score for s in skills])
    if level is None:
        return user.level

    if level != user.level:
        logger.info("User %s level %s -> %s", user_id, user.level, level)
    user.level = level
    store.save_user(db, user)
    return level
