"""Progress aggregator: per-category running scores and the overall mean."""

from typing import Optional

from sqlalchemy.orm import Session

from skillcheck.models.category_progress import CategoryProgress
from skillcheck.models.test_result import TestResult
from skillcheck.scoring import blend, mean, round_score
from skillcheck.services import store

DEFAULT_CATEGORIES = ["Frontend", "Backend", "Databases", "Algorithms", "DevOps"]


def default_categories() -> dict[str, int]:
    return {c: 0 for c in DEFAULT_CATEGORIES}


def overall_of(categories: dict[str, int]) -> int:
    """Rounded mean over every tracked category; 0 when none is tracked."""
    if not categories:
        return 0
    return round_score(mean(categories.values()))


def blend_category(categories: dict[str, int], category: str, score: int) -> dict[str, int]:
    """Return a copy of `categories` with `score` folded into `category`.

    A category still at 0 counts as unseen and takes the score as is.
    """
    updated = dict(categories)
    current = updated.get(category)
    updated[category] = blend(current if current else None, score)
    return updated


def initialize(db: Session, user_id: str) -> CategoryProgress:
    progress = CategoryProgress(
        user_id=user_id,
        categories=store.dumps(default_categories()),
        overall=0,
        last_updated=store.now_utc(),
    )
    return store.save_category_progress(db, progress)


def get_progress(db: Session, user_id: str) -> Optional[CategoryProgress]:
    return store.get_category_progress(db, user_id)


def apply_result(db: Session, user_id: str, result: TestResult) -> CategoryProgress:
    """Fold one attempt into the user's progress and persist it."""
    progress = store.get_category_progress(db, user_id)
    if progress is None:
        progress = CategoryProgress(user_id=user_id, categories=store.dumps(default_categories()))

    categories = blend_category(progress.category_map, result.category, result.score)
    progress.categories = store.dumps(categories)
    progress.overall = overall_of(categories)
    progress.last_updated = store.now_utc()
    return store.save_category_progress(db, progress)
