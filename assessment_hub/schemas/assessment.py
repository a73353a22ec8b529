import enum
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import Field, model_validator

from assessment_hub.core.schemas import CamelModel, RecordModel, UtcDatetime
from assessment_hub.schemas.auth import UserPublic
from assessment_hub.schemas.department import Department


class AssessmentType(enum.IntEnum):
    PERFORMANCE = 1
    CLIMATE = 2
    FEEDBACK_360 = 3

    @property
    def slug(self) -> str:
        return _TYPE_SLUGS[self]


_TYPE_SLUGS = {
    AssessmentType.PERFORMANCE: "performance",
    AssessmentType.CLIMATE: "climate",
    AssessmentType.FEEDBACK_360: "feedback360",
}


class AIOption(str, enum.Enum):
    """Analysis facets a creator can switch on for the AI summary."""
    PATTERNS = "patterns"
    DEVELOPMENT = "development"
    STRENGTHS = "strengths"
    SUGGESTIONS = "suggestions"
    COMPARISON = "comparison"
    TRENDS = "trends"


# Fields a creator may change after creation
EDITABLE_FIELDS = ("name", "type_id", "start_date", "end_date", "ai_prompt")


class AssessmentBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    type_id: AssessmentType
    start_date: date
    end_date: date
    ai_prompt: Optional[str] = Field(None, max_length=4000)

    @model_validator(mode="after")
    def check_period(self):
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class AssessmentCreate(AssessmentBase):
    """Request body for POST /assessments, with optional association lists."""
    departments: List[int] = Field(default_factory=list)
    participants: List[int] = Field(default_factory=list)
    ai_analysis: List[AIOption] = Field(default_factory=list)


class AssessmentUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    type_id: Optional[AssessmentType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    ai_prompt: Optional[str] = Field(None, max_length=4000)

    def to_changes(self) -> Dict[str, Any]:
        """Explicitly-set fields in the shape the store keeps them."""
        changes = self.model_dump(exclude_unset=True)
        for key in ("start_date", "end_date"):
            if isinstance(changes.get(key), date):
                changes[key] = changes[key].isoformat()
        if changes.get("type_id") is not None:
            changes["type_id"] = int(changes["type_id"])
        # Same as on create: a blank prompt means no prompt
        if "ai_prompt" in changes and not changes["ai_prompt"]:
            changes["ai_prompt"] = None
        return changes


class AssessmentInsert(CamelModel):
    """Store input for a new assessment. Dates are ISO `YYYY-MM-DD` strings."""
    name: str
    type_id: int
    start_date: str
    end_date: str
    created_by: int
    ai_prompt: Optional[str] = None


class Assessment(RecordModel):
    id: int
    name: str
    type_id: int
    start_date: str
    end_date: str
    created_by: int
    created_at: UtcDatetime
    ai_prompt: Optional[str] = None


class AssessmentDetail(Assessment):
    departments: List[Department] = Field(default_factory=list)
    participants: List[UserPublic] = Field(default_factory=list)
    ai_options: List[str] = Field(default_factory=list)


class ParticipantAdd(CamelModel):
    user_id: int


class AssessmentCounts(CamelModel):
    performance: int = 0
    climate: int = 0
    feedback360: int = 0
    total: int = 0


class DashboardSummary(CamelModel):
    assessment_counts: AssessmentCounts
    recent_assessments: List[Assessment]
