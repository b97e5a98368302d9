"""User model."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.orm import relationship

from skillcheck.database import Base

LEVEL_BEGINNER = "Beginner"
LEVEL_INTERMEDIATE = "Intermediate"
LEVEL_ADVANCED = "Advanced"
LEVELS = (LEVEL_BEGINNER, LEVEL_INTERMEDIATE, LEVEL_ADVANCED)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    student_id = Column(String(50), nullable=False, default="")
    career = Column(String(255), nullable=False, default="")
    semester = Column(String(10), nullable=False, default="1")
    specialization = Column(String(255), nullable=False, default="")  # only from semester 7 on
    bio = Column(Text, nullable=False, default="")
    level = Column(String(20), nullable=False, default=LEVEL_BEGINNER)  # Beginner | Intermediate | Advanced
    avatar_url = Column(String(512), nullable=True)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    # Relationships
    test_results = relationship("TestResult", back_populates="user")
    skills = relationship("Skill", back_populates="user")
    progress = relationship("CategoryProgress", back_populates="user", uselist=False)
    cv = relationship("UserCV", back_populates="user", uselist=False)
