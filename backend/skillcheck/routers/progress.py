"""Skills and category progress of the current user."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from skillcheck.database import get_db
from skillcheck.middleware.auth import get_current_user
from skillcheck.models.user import User
from skillcheck.schemas.progress import ProgressResponse, SkillListResponse, SkillResponse
from skillcheck.services import progress_service, skill_service, store

router = APIRouter(prefix="/api", tags=["progress"])


@router.get("/skills", response_model=SkillListResponse)
def get_skills(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    skills = skill_service.list_skills(db, current_user.id)
    return SkillListResponse(skills=[SkillResponse.model_validate(s) for s in skills])


@router.get("/progress", response_model=ProgressResponse)
def get_progress(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Per-category running scores; zeros for a user who never took a test."""
    progress = progress_service.get_progress(db, current_user.id)
    if progress is None:
        return ProgressResponse(
            overall=0,
            categories=progress_service.default_categories(),
            last_updated=store.as_utc(current_user.created_at).isoformat(),
        )
    return ProgressResponse(
        overall=progress.overall,
        categories=progress.category_map,
        last_updated=store.as_utc(progress.last_updated).isoformat(),
    )
