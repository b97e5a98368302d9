"""Tests router: catalog, submissions and result history."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from skillcheck.database import get_db
from skillcheck.errors import NotFoundError, SubmissionError
from skillcheck.middleware.auth import get_current_user, get_optional_user
from skillcheck.models.test import Test
from skillcheck.models.test_result import TestResult
from skillcheck.models.user import User
from skillcheck.schemas.test import (
    OptionResponse,
    QuestionResponse,
    SubmissionRequest,
    SubmissionResponse,
    TestDetail,
    TestResultResponse,
    TestSummary,
)
from skillcheck.services import store, test_engine

router = APIRouter(prefix="/api/tests", tags=["tests"])


def _summary(test: Test) -> dict:
    return dict(
        id=test.id,
        title=test.title,
        description=test.description or "",
        duration=test.duration or "",
        category=test.category,
        icon=test.icon or "",
        difficulty=test.difficulty or "",
        question_count=len(test.questions),
    )


def _result_to_response(result: TestResult) -> TestResultResponse:
    return TestResultResponse(
        id=result.id,
        test_id=result.test_id,
        name=result.name,
        category=result.category,
        score=result.score,
        answers=result.answer_map,
        date=store.as_utc(result.date).isoformat(),
    )


@router.get("", response_model=list[TestSummary])
def list_tests(db: Session = Depends(get_db)):
    return [TestSummary(**_summary(t)) for t in test_engine.list_tests(db)]


# Declared before /{test_id} so "results" is not taken for a test id
@router.get("/results", response_model=list[TestResultResponse])
def list_results(
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """The current user's results, newest first."""
    results = store.list_test_results(db, current_user.id)
    if category:
        results = [r for r in results if r.category == category]
    return [_result_to_response(r) for r in results]


@router.get("/{test_id}", response_model=TestDetail)
def get_test(test_id: str, db: Session = Depends(get_db)):
    """Test with its questions. The answer key is never sent."""
    test = test_engine.get_test(db, test_id)
    if not test:
        raise HTTPException(status_code=404, detail="Test not found")
    questions = [
        QuestionResponse(
            index=i,
            question=q.question,
            options=[OptionResponse(**o) for o in q.option_list],
        )
        for i, q in enumerate(test.questions)
    ]
    return TestDetail(**_summary(test), questions=questions)


@router.post("/{test_id}/submit", response_model=SubmissionResponse)
def submit_test(
    test_id: str,
    req: SubmissionRequest,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
):
    """Score an attempt. Results are only saved for signed-in users."""
    try:
        outcome = test_engine.submit(db, test_id, req.answers, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except SubmissionError as e:
        raise HTTPException(status_code=422, detail=str(e))
    result = outcome["result"]
    return SubmissionResponse(
        test_id=outcome["test_id"],
        category=outcome["category"],
        score=outcome["score"],
        correct_count=outcome["correct_count"],
        total_count=outcome["total_count"],
        saved=result is not None,
        level=outcome["level"],
        result=_result_to_response(result) if result is not None else None,
    )
