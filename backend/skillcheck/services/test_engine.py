"""Test engine: serves test definitions, scores attempts, runs the update pipeline.

A saved attempt flows through:
    TestResult -> skill_service -> progress_service -> level_service
inside one unit of work, so a failure at any step leaves the user's
results, skills, progress and level exactly as they were.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from skillcheck.errors import NotFoundError, SubmissionError
from skillcheck.models.test import Test
from skillcheck.models.test_result import TestResult
from skillcheck.models.user import User
from skillcheck.scoring import attempt_score
from skillcheck.services import level_service, progress_service, skill_service, store
from skillcheck.services.locks import user_lock

logger = logging.getLogger(__name__)


def get_test(db: Session, test_id: str) -> Optional[Test]:
    return store.get_test(db, test_id)


def list_tests(db: Session) -> list[Test]:
    return store.list_tests(db)


def validate_answers(test: Test, answers: dict[int, str]) -> None:
    """Reject answers for questions or options the test does not have."""
    total = len(test.questions)
    for index, option_id in answers.items():
        if not isinstance(index, int) or index < 0 or index >= total:
            raise SubmissionError(f"Unknown question index {index!r}")
        if option_id not in test.questions[index].option_ids:
            raise SubmissionError(f"Unknown option {option_id!r} for question {index}")


def score(test: Test, answers: dict[int, str]) -> dict:
    """Score an attempt against the test's answer key.

    Unanswered questions count as incorrect. A test without questions
    scores 0.

    Returns:
        dict with score (0..100), correct_count and total_count.

    Raises:
        SubmissionError: If an answer names an unknown question or option.
    """
    validate_answers(test, answers)
    correct = sum(
        1 for i, question in enumerate(test.questions)
        if answers.get(i) == question.correct_answer
    )
    total = len(test.questions)
    return {
        "score": attempt_score(correct, total),
        "correct_count": correct,
        "total_count": total,
    }


def submit(db: Session, test_id: str, answers: dict[int, str], user: Optional[User] = None) -> dict:
    """Score an attempt and, for a signed-in user, persist it and update their state.

    Guests get the score back but nothing is stored.

    Raises:
        NotFoundError: If the test does not exist.
        SubmissionError: If the answers are malformed.
        PersistenceError: If saving fails; nothing is written in that case.
    """
    test = store.get_test(db, test_id)
    if test is None:
        raise NotFoundError("Test not found")

    outcome = score(test, answers)
    outcome.update({"test_id": test.id, "category": test.category, "result": None, "level": None})
    if user is None:
        return outcome

    with user_lock(user.id), store.unit_of_work(db):
        result = TestResult(
            user_id=user.id,
            test_id=test.id,
            name=test.title,
            category=test.category,
            score=outcome["score"],
            answers=store.dumps({str(k): v for k, v in answers.items()}),
            date=store.now_utc(),
        )
        store.append_test_result(db, result)
        skill_service.apply_result(db, result)
        progress_service.apply_result(db, user.id, result)
        outcome["level"] = level_service.reclassify(db, user.id)

    logger.info("User %s scored %d on test %s", user.id, outcome["score"], test.id)
    outcome["result"] = result
    return outcome
