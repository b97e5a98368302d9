"""Auth and profile request/response schemas."""

from typing import Optional
from pydantic import BaseModel


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str
    student_id: str = ""
    career: str = ""
    semester: str = "1"
    specialization: str = ""
    bio: str = ""


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    student_id: Optional[str] = None
    career: Optional[str] = None
    semester: Optional[str] = None
    specialization: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    email: str
    name: str
    student_id: str
    career: str
    semester: str
    specialization: str
    bio: str
    level: str  # Beginner | Intermediate | Advanced
    avatar_url: Optional[str] = None
    created_at: str

    class Config:
        from_attributes = True
