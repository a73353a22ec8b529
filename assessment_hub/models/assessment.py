"""
Assessment model and its three bare many-to-many link tables.

Link rows carry no payload; the unique constraint on each pair makes
inserting an existing link a no-op for the store.
"""
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, UniqueConstraint

from assessment_hub.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Assessment(Base):
    __tablename__ = "assessments"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    type_id = Column(Integer, nullable=False, index=True)  # 1 performance, 2 climate, 3 feedback-360
    start_date = Column(String(10), nullable=False)  # YYYY-MM-DD
    end_date = Column(String(10), nullable=False)
    created_by = Column(Integer, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    ai_prompt = Column(Text, nullable=True)

    def __repr__(self):
        return f"<Assessment {self.id}: {self.name}>"


class AssessmentDepartment(Base):
    __tablename__ = "assessment_departments"
    __table_args__ = (UniqueConstraint("assessment_id", "department_id"),)

    id = Column(Integer, primary_key=True)
    assessment_id = Column(Integer, nullable=False, index=True)
    department_id = Column(Integer, nullable=False)


class AssessmentParticipant(Base):
    __tablename__ = "assessment_participants"
    __table_args__ = (UniqueConstraint("assessment_id", "user_id"),)

    id = Column(Integer, primary_key=True)
    assessment_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, nullable=False, index=True)


class AssessmentAiOption(Base):
    __tablename__ = "assessment_ai_options"
    __table_args__ = (UniqueConstraint("assessment_id", "option_id"),)

    id = Column(Integer, primary_key=True)
    assessment_id = Column(Integer, nullable=False, index=True)
    option_id = Column(String, nullable=False)
