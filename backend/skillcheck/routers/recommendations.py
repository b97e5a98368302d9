"""Recommendations router: ranked catalog, personalized picks, course progress."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from skillcheck.config import settings
from skillcheck.database import get_db
from skillcheck.errors import NotFoundError
from skillcheck.middleware.auth import get_current_user
from skillcheck.models.user import User
from skillcheck.schemas.recommendation import (
    ProgressUpdate,
    RecommendationListResponse,
    RecommendationResponse,
)
from skillcheck.services import recommendation_service

router = APIRouter(prefix="/api/recommendations", tags=["recommendations"])


def _to_response(entry: dict) -> RecommendationResponse:
    rec = entry["recommendation"]
    return RecommendationResponse(
        id=rec.id,
        title=rec.title,
        description=rec.description or "",
        category=rec.category,
        difficulty=rec.difficulty or "",
        duration=rec.duration or "",
        icon=rec.icon or "",
        url=rec.url or "",
        platform=rec.platform or "",
        progress=entry["progress"],
        completed=entry["completed"],
    )


def _list_response(entries: list[dict]) -> RecommendationListResponse:
    items = [_to_response(e) for e in entries]
    return RecommendationListResponse(recommendations=items, total=len(items))


@router.get("", response_model=RecommendationListResponse)
def list_recommendations(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Whole catalog, weakest test categories first."""
    return _list_response(recommendation_service.ranked_for_user(db, current_user.id))


@router.get("/personalized", response_model=RecommendationListResponse)
def personalized(
    limit: Optional[int] = Query(None, ge=1, le=50),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Picks filtered by career and specialization, weak areas boosted."""
    entries = recommendation_service.personalized(
        db, current_user, limit or settings.RECOMMENDATION_LIMIT
    )
    return _list_response(entries)


@router.put("/{recommendation_id}/progress", response_model=RecommendationResponse)
def update_progress(
    recommendation_id: str,
    req: ProgressUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        entry = recommendation_service.update_progress(db, current_user.id, recommendation_id, req.progress)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _to_response(entry)


@router.post("/{recommendation_id}/complete", response_model=RecommendationResponse)
def complete(
    recommendation_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        entry = recommendation_service.complete(db, current_user.id, recommendation_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _to_response(entry)
