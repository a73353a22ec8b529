from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Text, DateTime

from assessment_hub.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class AssessmentResponse(Base):
    __tablename__ = "responses"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    # No foreign key: responses outlive a deleted assessment
    assessment_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    data = Column(Text, nullable=False)  # JSON payload
    submitted_at = Column(DateTime(timezone=True), default=_utcnow)
