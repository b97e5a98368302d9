"""Recommendation catalog and per-user progress overlay."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, String, Integer, DateTime, Text, ForeignKey, UniqueConstraint

from skillcheck.database import Base


class Recommendation(Base):
    __tablename__ = "recommendations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    # Insertion order of the catalog; ties in every ranking fall back to it
    seq = Column(Integer, nullable=False, default=0, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(100), nullable=False)
    difficulty = Column(String(50), nullable=False, default="")
    duration = Column(String(50), nullable=False, default="")
    icon = Column(String(50), nullable=False, default="")
    url = Column(String(512), nullable=False, default="")
    platform = Column(String(100), nullable=False, default="")
    # Null for the shared catalog; set for specialization items appended for one user
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=True, index=True)


class RecommendationProgress(Base):
    __tablename__ = "recommendation_progress"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    recommendation_id = Column(String(36), ForeignKey("recommendations.id"), nullable=False)
    progress = Column(Integer, nullable=False, default=0)
    completed = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("user_id", "recommendation_id", name="uq_rec_progress_user_rec"),
    )
