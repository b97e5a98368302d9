"""Auth router: registration, login, user info and profile edits."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from skillcheck.config import settings
from skillcheck.database import get_db
from skillcheck.middleware.auth import create_access_token, get_current_user
from skillcheck.middleware.rate_limit import limiter
from skillcheck.models.user import User
from skillcheck.schemas.auth import (
    LoginRequest,
    ProfileUpdate,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from skillcheck.services import account_service, store

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _user_to_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        student_id=user.student_id or "",
        career=user.career or "",
        semester=user.semester or "",
        specialization=user.specialization or "",
        bio=user.bio or "",
        level=user.level,
        avatar_url=user.avatar_url,
        created_at=store.as_utc(user.created_at).isoformat(),
    )


@router.post("/register", response_model=UserResponse, status_code=201)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def register(request: Request, req: RegisterRequest, db: Session = Depends(get_db)):
    """Register a new student and set up their empty CV, progress and courses."""
    try:
        user = account_service.register(db, req.model_dump())
    except account_service.EmailTakenError:
        raise HTTPException(status_code=409, detail="Email already registered")
    return _user_to_response(user)


@router.post("/login", response_model=TokenResponse)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
def login(request: Request, req: LoginRequest, db: Session = Depends(get_db)):
    """Login and get JWT token."""
    user = account_service.authenticate(db, req.email, req.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token({"sub": user.id})
    return TokenResponse(access_token=token)


@router.get("/me", response_model=UserResponse)
def get_me(current_user: User = Depends(get_current_user)):
    """Get current user info."""
    return _user_to_response(current_user)


@router.patch("/me", response_model=UserResponse)
def update_me(
    req: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Edit profile fields. Specialization is cleared below the seventh semester."""
    user = account_service.update_profile(db, current_user, req.model_dump(exclude_unset=True))
    return _user_to_response(user)
