"""CV router: upload, analysis, manual details and deletion."""

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from skillcheck.database import get_db
from skillcheck.errors import NotFoundError, SubmissionError
from skillcheck.middleware.auth import get_current_user
from skillcheck.models.user import User
from skillcheck.models.user_cv import UserCV
from skillcheck.schemas.cv import CVDetailsUpdate, CVResponse
from skillcheck.services import cv_service, store

router = APIRouter(prefix="/api/cv", tags=["cv"])


def _iso(value) -> Optional[str]:
    return store.as_utc(value).isoformat() if value else None


def _cv_to_response(user_id: str, cv: Optional[UserCV]) -> CVResponse:
    if cv is None:
        cv = cv_service.empty_cv(UserCV(user_id=user_id))
    return CVResponse(
        user_id=user_id,
        file_name=cv.file_name or "",
        file_size=cv.file_size or "",
        file_type=cv.file_type or "",
        file_url=cv.file_url or "",
        upload_date=_iso(cv.upload_date),
        skills=cv.skill_list,
        experience=cv.experience_list,
        education=cv.education_list,
        last_analysis_date=_iso(cv.last_analysis_date),
    )


@router.get("", response_model=CVResponse)
def get_cv(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return _cv_to_response(current_user.id, cv_service.get_cv(db, current_user.id))


@router.post("", response_model=CVResponse)
async def upload_cv(
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Upload a CV (PDF/DOC/DOCX, size capped by MAX_CV_SIZE_MB) and analyze it."""
    content = await file.read()
    try:
        # The service waits on the per-user lock; keep that off the event loop
        cv = await run_in_threadpool(
            cv_service.upload, db, current_user, file.filename or "", file.content_type or "", content
        )
    except SubmissionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _cv_to_response(current_user.id, cv)


@router.post("/analyze", response_model=CVResponse)
def analyze_cv(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        cv = cv_service.analyze(db, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _cv_to_response(current_user.id, cv)


@router.put("", response_model=CVResponse)
def update_cv_details(
    req: CVDetailsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    experience = [e.model_dump() for e in req.experience] if req.experience is not None else None
    education = [e.model_dump() for e in req.education] if req.education is not None else None
    cv = cv_service.update_details(db, current_user.id, experience, education)
    return _cv_to_response(current_user.id, cv)


@router.delete("", response_model=CVResponse)
def delete_cv(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Clear the CV. The record stays, emptied."""
    return _cv_to_response(current_user.id, cv_service.delete(db, current_user.id))
