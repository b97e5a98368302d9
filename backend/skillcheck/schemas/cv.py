"""CV schemas."""

from typing import Optional
from pydantic import BaseModel


class ExperienceEntry(BaseModel):
    title: str
    company: str
    start_date: str = ""
    end_date: str = ""
    description: str = ""


class EducationEntry(BaseModel):
    degree: str
    institution: str
    start_date: str = ""
    end_date: str = ""
    specialization: Optional[str] = None


class CVResponse(BaseModel):
    user_id: str
    file_name: str
    file_size: str
    file_type: str
    file_url: str
    upload_date: Optional[str] = None
    skills: list[str]
    experience: list[ExperienceEntry]
    education: list[EducationEntry]
    last_analysis_date: Optional[str] = None


class CVDetailsUpdate(BaseModel):
    experience: Optional[list[ExperienceEntry]] = None
    education: Optional[list[EducationEntry]] = None
