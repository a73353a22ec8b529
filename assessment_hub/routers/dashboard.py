from fastapi import APIRouter, Depends

from assessment_hub.dependencies import get_storage
from assessment_hub.routers.auth_deps import get_current_user
from assessment_hub.schemas.assessment import AssessmentCounts, AssessmentType, DashboardSummary
from assessment_hub.schemas.auth import User
from assessment_hub.storage import Storage

router = APIRouter(tags=["dashboard"])

RECENT_LIMIT = 5


@router.get("/dashboard", response_model=DashboardSummary)
def get_dashboard(
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    """Assessment counts per type and the most recently created ones, for the caller only."""
    assessments = storage.get_assessments_by_user(current_user.id)

    counts = AssessmentCounts(total=len(assessments))
    for assessment_type in AssessmentType:
        matching = sum(1 for a in assessments if a.type_id == assessment_type)
        counts = counts.model_copy(update={assessment_type.slug: matching})

    recent = sorted(assessments, key=lambda a: (a.created_at, a.id), reverse=True)[:RECENT_LIMIT]
    return DashboardSummary(assessment_counts=counts, recent_assessments=recent)
