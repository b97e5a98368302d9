"""Test catalog models: a test and its ordered questions."""

import json
import uuid

from sqlalchemy import Column, String, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship

from skillcheck.database import Base


class Test(Base):
    __tablename__ = "tests"
    __test__ = False  # keep pytest from collecting the model

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    duration = Column(String(50), nullable=False, default="")
    category = Column(String(100), nullable=False, index=True)
    icon = Column(String(50), nullable=False, default="")
    difficulty = Column(String(50), nullable=False, default="")

    # Relationships
    questions = relationship(
        "TestQuestion",
        back_populates="test",
        order_by="TestQuestion.position",
        cascade="all, delete-orphan",
    )


class TestQuestion(Base):
    __tablename__ = "test_questions"
    __test__ = False

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    test_id = Column(String(36), ForeignKey("tests.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False)  # 0-based; answers are keyed by it
    question = Column(Text, nullable=False)
    options = Column(Text, nullable=False, default="[]")  # JSON: [{id, text}]
    correct_answer = Column(String(20), nullable=False)

    # Relationships
    test = relationship("Test", back_populates="questions")

    @property
    def option_list(self) -> list[dict]:
        return json.loads(self.options) if self.options else []

    @property
    def option_ids(self) -> set[str]:
        return {o["id"] for o in self.option_list}
