import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status

from assessment_hub.core.exceptions import ValidationFailedError
from assessment_hub.dependencies import get_storage
from assessment_hub.routers.auth_deps import get_assessment_or_404, get_current_user, get_owned_assessment
from assessment_hub.schemas.auth import User
from assessment_hub.schemas.payloads import PayloadError, encode_payload, parse_response_payload
from assessment_hub.schemas.response import (
    AssessmentResponse,
    ResponseCreate,
    ResponseInsert,
    SampleResponsesRequest,
    SampleResponsesResult,
)
from assessment_hub.services.sample_data import generate_sample_responses
from assessment_hub.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["responses"])


@router.post("/responses", response_model=AssessmentResponse, status_code=status.HTTP_201_CREATED)
def submit_response(
    data: ResponseCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    """
    Submit a response as the current user.
    `data` is checked against the payload schema of the assessment's type.
    """
    assessment = get_assessment_or_404(data.assessment_id, storage)
    try:
        payload = parse_response_payload(assessment.type_id, data.data)
    except PayloadError as e:
        raise ValidationFailedError(e.message, errors=e.errors)

    response = storage.create_response(ResponseInsert(
        assessment_id=assessment.id,
        user_id=current_user.id,
        data=encode_payload(payload),
    ))
    logger.info(f"User {current_user.id} submitted response {response.id} for assessment {assessment.id}")
    return response


@router.get("/assessments/{assessment_id}/responses", response_model=List[AssessmentResponse])
def list_responses(
    assessment_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    get_owned_assessment(assessment_id, storage, current_user, "view responses of")
    return storage.get_responses_by_assessment(assessment_id)


@router.post(
    "/assessments/{assessment_id}/generate-test-responses",
    response_model=SampleResponsesResult,
    status_code=status.HTTP_201_CREATED
)
def generate_test_responses(
    assessment_id: int,
    data: Optional[SampleResponsesRequest] = None,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    assessment = get_owned_assessment(assessment_id, storage, current_user, "generate responses for")
    count = data.count if data else SampleResponsesRequest().count

    participants = storage.get_assessment_participants(assessment_id)
    if not participants:
        raise ValidationFailedError("Add participants to the assessment before generating responses")

    created = generate_sample_responses(storage, assessment, participants, count)
    return SampleResponsesResult(
        message=f"{len(created)} test responses generated",
        count=len(created),
        responses=created,
    )
