"""
Response payloads, one schema per assessment type.

A response's `data` is stored as JSON text. It is validated on the way in
against the schema for its assessment's type and decoded strictly on the
way out, so a malformed payload is an error rather than an empty object.
Unknown keys are allowed and kept untouched.
"""
import json
from typing import Annotated, Any, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from assessment_hub.core.exceptions import field_errors
from assessment_hub.schemas.assessment import AssessmentType

Score = Annotated[int, Field(ge=1, le=5)]


class PayloadError(ValueError):
    """Raised when a payload is not valid JSON or does not match its schema."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ResponsePayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    comments: Optional[str] = None


class PerformancePayload(ResponsePayload):
    scores: Dict[str, Score] = Field(..., min_length=1)
    evaluatee_id: Optional[int] = None


class ClimatePayload(ResponsePayload):
    answers: Dict[str, Score] = Field(..., min_length=1)
    department_id: Optional[int] = None


class Feedback360Payload(ResponsePayload):
    evaluatee_id: int
    relationship: Literal["self", "peer", "manager", "direct_report"]
    scores: Dict[str, Score] = Field(..., min_length=1)


PAYLOAD_MODELS: Dict[AssessmentType, Type[ResponsePayload]] = {
    AssessmentType.PERFORMANCE: PerformancePayload,
    AssessmentType.CLIMATE: ClimatePayload,
    AssessmentType.FEEDBACK_360: Feedback360Payload,
}


def parse_response_payload(assessment_type: int, raw: Union[str, Dict[str, Any]]) -> Dict[str, Any]:
    """Decode (if needed) and validate a payload. Returns the payload dict unchanged."""
    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise PayloadError(f"Response data is not valid JSON: {e.msg}")
    else:
        data = raw

    if not isinstance(data, dict):
        raise PayloadError("Response data must be a JSON object")

    model = PAYLOAD_MODELS[AssessmentType(assessment_type)]
    # Strict: the raw dict is what gets stored, so no coercion of "4" or true into scores
    try:
        model.model_validate(data, strict=True)
    except ValidationError as e:
        raise PayloadError("Response data does not match the assessment type", field_errors(e.errors()))
    return data


def encode_payload(data: Dict[str, Any]) -> str:
    return json.dumps(data, ensure_ascii=False)


def decode_payload(text: str) -> Dict[str, Any]:
    """Decode stored JSON text. Stored payloads were validated on write."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise PayloadError(f"Stored payload is corrupted: {e.msg}")
    if not isinstance(data, dict):
        raise PayloadError("Stored payload is not a JSON object")
    return data
