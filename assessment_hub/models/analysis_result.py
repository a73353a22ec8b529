from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Text, DateTime

from assessment_hub.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class AnalysisResult(Base):
    __tablename__ = "analysis_results"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    assessment_id = Column(Integer, nullable=False, index=True)
    analysis = Column(Text, nullable=False)  # JSON analysis document
    generated_at = Column(DateTime(timezone=True), default=_utcnow)
