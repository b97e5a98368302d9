"""Category progress model: running per-category score and overall mean."""

import json
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship

from skillcheck.database import Base


class CategoryProgress(Base):
    __tablename__ = "category_progress"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)
    categories = Column(Text, nullable=False, default="{}")  # JSON: {category: score}
    overall = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    # Relationships
    user = relationship("User", back_populates="progress")

    @property
    def category_map(self) -> dict[str, int]:
        return json.loads(self.categories) if self.categories else {}
