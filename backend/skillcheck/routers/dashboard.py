"""Dashboard router: category performance and statistics."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from skillcheck.database import get_db
from skillcheck.middleware.auth import get_current_user
from skillcheck.models.user import User
from skillcheck.schemas.dashboard import CategoryPerformanceResponse, StatisticsResponse
from skillcheck.services import performance_service

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/categories", response_model=CategoryPerformanceResponse)
def category_performance(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return CategoryPerformanceResponse(categories=performance_service.report(db, current_user.id))


@router.get("/statistics", response_model=StatisticsResponse)
def statistics(
    time_range: str = Query("all", alias="range"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Headline numbers, restricted to results inside `range` (all | month | week)."""
    if time_range not in performance_service.TIME_RANGES:
        raise HTTPException(status_code=400, detail="range must be 'all', 'month' or 'week'")
    stats = performance_service.statistics(db, current_user.id, time_range)
    return StatisticsResponse(time_range=time_range, **stats)
