"""User CV model: uploaded file metadata plus the extracted profile.

At most one row per user. Deleting a CV overwrites the row with empty
values; an empty row therefore means either "never uploaded" or "cleared".
"""

import json
from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, DateTime, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from skillcheck.database import Base


class UserCV(Base):
    __tablename__ = "user_cvs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)

    # Uploaded file
    file_name = Column(String(255), nullable=False, default="")
    file_size = Column(String(50), nullable=False, default="")    # human readable, e.g. "12.50 KB"
    file_type = Column(String(255), nullable=False, default="")   # MIME type
    file_url = Column(Text, nullable=False, default="")           # path under UPLOAD_DIR
    upload_date = Column(DateTime, nullable=True)

    # Extracted profile
    skills = Column(Text, nullable=False, default="[]")       # JSON array of skill names
    experience = Column(Text, nullable=False, default="[]")   # JSON: [{title, company, start_date, end_date, description}]
    education = Column(Text, nullable=False, default="[]")    # JSON: [{degree, institution, start_date, end_date, specialization}]
    last_analysis_date = Column(DateTime, nullable=True)

    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # Relationships
    user = relationship("User", back_populates="cv")

    @property
    def skill_list(self) -> list[str]:
        return json.loads(self.skills) if self.skills else []

    @property
    def experience_list(self) -> list[dict]:
        return json.loads(self.experience) if self.experience else []

    @property
    def education_list(self) -> list[dict]:
        return json.loads(self.education) if self.education else []
