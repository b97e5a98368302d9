"""Test result model: one completed attempt, append-only."""

import json
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship

from skillcheck.database import Base


class TestResult(Base):
    __tablename__ = "test_results"
    __test__ = False

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    test_id = Column(String(36), ForeignKey("tests.id"), nullable=False)
    name = Column(String(255), nullable=False)          # test title at attempt time
    category = Column(String(100), nullable=False)      # copied from the test
    score = Column(Integer, nullable=False)             # 0..100
    answers = Column(Text, nullable=False, default="{}")  # JSON: {question_index: option_id}
    date = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc), index=True)

    # Relationships
    user = relationship("User", back_populates="test_results")
    test = relationship("Test")

    @property
    def answer_map(self) -> dict[int, str]:
        raw = json.loads(self.answers) if self.answers else {}
        return {int(k): v for k, v in raw.items()}
