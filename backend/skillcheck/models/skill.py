"""Skill model: a named score a user holds within a category."""

import uuid

from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from skillcheck.database import Base


class Skill(Base):
    __tablename__ = "skills"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    category = Column(String(100), nullable=False)  # test category, or "CV" for CV-detected skills
    score = Column(Integer, nullable=False, default=0)
    # Order the skill was first credited in; keeps a category in skill-table order
    seq = Column(Integer, nullable=False, default=0)

    # Relationships
    user = relationship("User", back_populates="skills")

    __table_args__ = (
        UniqueConstraint("user_id", "name", "category", name="uq_skill_user_name_category"),
    )
