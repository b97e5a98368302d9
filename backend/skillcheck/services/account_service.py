"""Account service: registration, sign-in checks and profile edits."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from skillcheck.errors import SubmissionError
from skillcheck.middleware.auth import hash_password, verify_password
from skillcheck.models.user import User, LEVEL_BEGINNER
from skillcheck.services import cv_service, progress_service, recommendation_service, store

logger = logging.getLogger(__name__)

SPECIALIZATION_MIN_SEMESTER = 7
PROFILE_FIELDS = ("name", "student_id", "career", "semester", "specialization", "bio", "avatar_url")


class EmailTakenError(SubmissionError):
    pass


def semester_number(semester: Optional[str]) -> int:
    try:
        return int(semester or 0)
    except (TypeError, ValueError):
        return 0


def allowed_specialization(semester: Optional[str], specialization: Optional[str]) -> str:
    """Specialization only applies from the seventh semester on."""
    if semester_number(semester) < SPECIALIZATION_MIN_SEMESTER:
        return ""
    return specialization or ""


def initialize_user_data(db: Session, user: User) -> None:
    """Empty CV, zeroed progress and specialization courses for a new user."""
    cv_service.initialize(db, user.id)
    if store.get_category_progress(db, user.id) is None:
        progress_service.initialize(db, user.id)
    recommendation_service.seed_for_specialization(db, user)


def register(db: Session, data: dict) -> User:
    """Create a user and their starting data in one unit of work.

    Raises:
        EmailTakenError: If the email is already registered.
    """
    with store.unit_of_work(db):
        if store.get_user_by_email(db, data["email"]) is not None:
            raise EmailTakenError("Email already registered")

        user = User(
            email=data["email"],
            password_hash=hash_password(data["password"]),
            name=data["name"],
            student_id=data.get("student_id") or "",
            career=data.get("career") or "",
            semester=str(data.get("semester") or "1"),
            bio=data.get("bio") or "",
            avatar_url=data.get("avatar_url"),
            level=LEVEL_BEGINNER,
        )
        user.specialization = allowed_specialization(user.semester, data.get("specialization"))
        store.save_user(db, user)
        initialize_user_data(db, user)

    logger.info("Registered user %s", user.id)
    return user


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    user = store.get_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


def update_profile(db: Session, user: User, changes: dict) -> User:
    """Apply profile edits; unknown keys are ignored."""
    with store.unit_of_work(db):
        for field in PROFILE_FIELDS:
            if field in changes and changes[field] is not None:
                value = changes[field]
                setattr(user, field, str(value) if field == "semester" else value)
        user.specialization = allowed_specialization(user.semester, user.specialization)
        store.save_user(db, user)
    return user
