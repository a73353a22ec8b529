import logging
from typing import List

from fastapi import APIRouter, Depends, status
from pydantic import ValidationError

from assessment_hub.core.exceptions import NotFoundError, ValidationFailedError, field_errors
from assessment_hub.dependencies import get_storage
from assessment_hub.routers.auth_deps import get_assessment_or_404, get_current_user, get_owned_assessment
from assessment_hub.schemas.assessment import (
    EDITABLE_FIELDS,
    Assessment,
    AssessmentBase,
    AssessmentCreate,
    AssessmentDetail,
    AssessmentInsert,
    AssessmentUpdate,
    ParticipantAdd,
)
from assessment_hub.schemas.auth import User, UserPublic
from assessment_hub.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/assessments",
    tags=["assessments"]
)


def build_detail(storage: Storage, assessment: Assessment) -> AssessmentDetail:
    """Assessment joined with its departments, participants and AI options."""
    participants = storage.get_assessment_participants(assessment.id)
    return AssessmentDetail(
        **assessment.model_dump(),
        departments=storage.get_departments_by_assessment(assessment.id),
        participants=[UserPublic.model_validate(p.model_dump()) for p in participants],
        ai_options=storage.get_ai_options_by_assessment(assessment.id),
    )


@router.post("", response_model=Assessment, status_code=status.HTTP_201_CREATED)
def create_assessment(
    data: AssessmentCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    """
    Create an assessment owned by the caller.
    Department, participant and AI-option ids in the body are linked right away.
    """
    assessment = storage.create_assessment(AssessmentInsert(
        name=data.name,
        type_id=int(data.type_id),
        start_date=data.start_date.isoformat(),
        end_date=data.end_date.isoformat(),
        created_by=current_user.id,
        ai_prompt=data.ai_prompt or None,
    ))

    for department_id in data.departments:
        storage.add_department_to_assessment(assessment.id, department_id)
    for user_id in data.participants:
        storage.add_participant_to_assessment(assessment.id, user_id)
    for option in data.ai_analysis:
        storage.add_ai_option_to_assessment(assessment.id, option.value)

    logger.info(f"User {current_user.id} created assessment {assessment.id} (type {assessment.type_id})")
    return assessment


@router.get("", response_model=List[Assessment])
def list_my_assessments(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    return storage.get_assessments_by_user(current_user.id)


@router.get("/{assessment_id}", response_model=AssessmentDetail)
def get_assessment(
    assessment_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    assessment = get_assessment_or_404(assessment_id, storage)
    return build_detail(storage, assessment)


@router.put("/{assessment_id}", response_model=Assessment)
def update_assessment(
    assessment_id: int,
    data: AssessmentUpdate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    """
    Partial update. The merged record is validated again before it is stored,
    so e.g. moving startDate past the existing endDate is rejected.
    """
    assessment = get_owned_assessment(assessment_id, storage, current_user, "modify")
    changes = data.to_changes()
    if not changes:
        return assessment

    merged = {**assessment.model_dump(include=set(EDITABLE_FIELDS)), **changes}
    try:
        AssessmentBase.model_validate(merged)
    except ValidationError as e:
        raise ValidationFailedError("Invalid assessment data", errors=field_errors(e.errors()))

    updated = storage.update_assessment(assessment_id, changes)
    if updated is None:
        raise NotFoundError("Assessment not found")
    logger.info(f"Assessment {assessment_id} updated fields: {sorted(changes)}")
    return updated


@router.delete("/{assessment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_assessment(
    assessment_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    get_owned_assessment(assessment_id, storage, current_user, "delete")
    storage.delete_assessment(assessment_id)
    logger.info(f"Assessment {assessment_id} deleted by user {current_user.id}")


@router.post("/{assessment_id}/participants", response_model=AssessmentDetail)
def add_participant(
    assessment_id: int,
    data: ParticipantAdd,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    assessment = get_owned_assessment(assessment_id, storage, current_user, "modify")
    if storage.get_user(data.user_id) is None:
        raise ValidationFailedError(f"User {data.user_id} does not exist")
    storage.add_participant_to_assessment(assessment_id, data.user_id)
    return build_detail(storage, assessment)


@router.delete("/{assessment_id}/participants/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_participant(
    assessment_id: int,
    user_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    get_owned_assessment(assessment_id, storage, current_user, "modify")
    storage.remove_participant_from_assessment(assessment_id, user_id)
