"""Persistence adapter: per-entity reads and writes over the ORM session.

Business logic goes through these functions instead of querying the session
directly. Writes add and flush but never commit: the caller owns the unit of
work (see `unit_of_work`). Every SQLAlchemy failure surfaces as
PersistenceError.
"""

import functools
import json
import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from skillcheck.errors import PersistenceError
from skillcheck.models.user import User
from skillcheck.models.test import Test
from skillcheck.models.test_result import TestResult
from skillcheck.models.skill import Skill
from skillcheck.models.category_progress import CategoryProgress
from skillcheck.models.recommendation import Recommendation, RecommendationProgress
from skillcheck.models.user_cv import UserCV

logger = logging.getLogger(__name__)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; treat them as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _guarded(fn):
    """Convert SQLAlchemy failures raised by `fn` into PersistenceError."""

    @functools.wraps(fn)
    def wrapper(*args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except SQLAlchemyError as e:
            logger.exception("Store operation %s failed", fn.__name__)
            raise PersistenceError(f"{fn.__name__} failed") from e

    return wrapper


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """Commit everything done inside the block, or roll all of it back."""
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Unit of work rolled back")
        raise PersistenceError("Could not save changes") from e
    except Exception:
        db.rollback()
        raise


# ── Users ────────────────────────────────────────────────────────────────────

@_guarded
def get_user(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


@_guarded
def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(func.lower(User.email) == email.lower()).first()


@_guarded
def save_user(db: Session, user: User) -> User:
    db.add(user)
    db.flush()
    return user


# ── Tests ────────────────────────────────────────────────────────────────────

@_guarded
def get_test(db: Session, test_id: str) -> Optional[Test]:
    return db.query(Test).filter(Test.id == test_id).first()


@_guarded
def list_tests(db: Session) -> list[Test]:
    return db.query(Test).order_by(Test.id).all()


@_guarded
def save_test(db: Session, test: Test) -> Test:
    db.add(test)
    db.flush()
    return test


# ── Test results ─────────────────────────────────────────────────────────────

@_guarded
def append_test_result(db: Session, result: TestResult) -> TestResult:
    db.add(result)
    db.flush()
    return result


@_guarded
def list_test_results(db: Session, user_id: str) -> list[TestResult]:
    """All results of a user, newest first."""
    return (
        db.query(TestResult)
        .filter(TestResult.user_id == user_id)
        .order_by(TestResult.date.desc())
        .all()
    )


# ── Skills ───────────────────────────────────────────────────────────────────

@_guarded
def get_skills(db: Session, user_id: str) -> list[Skill]:
    return db.query(Skill).filter(Skill.user_id == user_id).order_by(Skill.seq).all()


@_guarded
def save_skills(db: Session, user_id: str, skills: list[Skill]) -> list[Skill]:
    """Replace the user's skill set with `skills`.

    Skills without a sequence number are numbered after the user's existing
    ones, in list order.
    """
    keep = {s.id for s in skills if s.id}
    for existing in db.query(Skill).filter(Skill.user_id == user_id).all():
        if existing.id not in keep:
            db.delete(existing)
    next_seq = (db.query(func.max(Skill.seq)).filter(Skill.user_id == user_id).scalar() or 0) + 1
    for skill in skills:
        skill.user_id = user_id
        if not skill.seq:
            skill.seq = next_seq
            next_seq += 1
        db.add(skill)
    db.flush()
    return skills


# ── Category progress ────────────────────────────────────────────────────────

@_guarded
def get_category_progress(db: Session, user_id: str) -> Optional[CategoryProgress]:
    return db.query(CategoryProgress).filter(CategoryProgress.user_id == user_id).first()


@_guarded
def save_category_progress(db: Session, progress: CategoryProgress) -> CategoryProgress:
    db.add(progress)
    db.flush()
    return progress


# ── Recommendations ──────────────────────────────────────────────────────────

@_guarded
def list_recommendations(db: Session, user_id: Optional[str] = None) -> list[Recommendation]:
    """Shared catalog plus the user's own appended items, in insertion order."""
    q = db.query(Recommendation)
    if user_id is None:
        q = q.filter(Recommendation.owner_id.is_(None))
    else:
        q = q.filter(or_(Recommendation.owner_id.is_(None), Recommendation.owner_id == user_id))
    return q.order_by(Recommendation.seq).all()


@_guarded
def get_recommendation(db: Session, recommendation_id: str) -> Optional[Recommendation]:
    return db.query(Recommendation).filter(Recommendation.id == recommendation_id).first()


@_guarded
def save_recommendation(db: Session, recommendation: Recommendation) -> Recommendation:
    if not recommendation.seq:
        last = db.query(func.max(Recommendation.seq)).scalar()
        recommendation.seq = (last or 0) + 1
    db.add(recommendation)
    db.flush()
    return recommendation


@_guarded
def get_recommendation_progress(db: Session, user_id: str) -> dict[str, RecommendationProgress]:
    rows = db.query(RecommendationProgress).filter(RecommendationProgress.user_id == user_id).all()
    return {r.recommendation_id: r for r in rows}


@_guarded
def save_recommendation_progress(db: Session, row: RecommendationProgress) -> RecommendationProgress:
    db.add(row)
    db.flush()
    return row


# ── CVs ──────────────────────────────────────────────────────────────────────

@_guarded
def get_cv(db: Session, user_id: str) -> Optional[UserCV]:
    return db.query(UserCV).filter(UserCV.user_id == user_id).first()


@_guarded
def save_cv(db: Session, cv: UserCV) -> UserCV:
    db.add(cv)
    db.flush()
    return cv


def dumps(value) -> str:
    """JSON encoding used for the Text-backed JSON columns."""
    return json.dumps(value, ensure_ascii=False)
