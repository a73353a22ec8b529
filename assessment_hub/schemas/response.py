from typing import Any, Dict, List, Union

from pydantic import Field

from assessment_hub.core.schemas import CamelModel, RecordModel, UtcDatetime


class ResponseCreate(CamelModel):
    """`data` may be sent as a JSON string or as an object."""
    assessment_id: int
    data: Union[str, Dict[str, Any]]


class ResponseInsert(CamelModel):
    assessment_id: int
    user_id: int
    data: str


class AssessmentResponse(RecordModel):
    id: int
    assessment_id: int
    user_id: int
    data: str
    submitted_at: UtcDatetime


class SampleResponsesRequest(CamelModel):
    count: int = Field(5, ge=1, le=20)


class SampleResponsesResult(CamelModel):
    message: str
    count: int
    responses: List[AssessmentResponse]
