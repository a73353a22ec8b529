"""
Analysis results and the AI endpoints that produce them.

The AI endpoints read the assessment's stored responses, so they are
creator-only and refuse to run when nothing has been submitted yet.
"""
import json
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request, status
from pydantic import ValidationError

from assessment_hub.core.config import settings
from assessment_hub.core.exceptions import AIError, AppException, ValidationFailedError, field_errors
from assessment_hub.core.limiter import limiter
from assessment_hub.dependencies import get_storage
from assessment_hub.routers.auth_deps import get_assessment_or_404, get_current_user, get_owned_assessment
from assessment_hub.schemas.analysis import (
    AnalysisCreate,
    AnalysisDocument,
    AnalysisResult,
    AnalysisResultInsert,
    FeedbackText,
    FeedbackTextRequest,
    GeneratedAnalysis,
    VisualizationRecommendations,
)
from assessment_hub.schemas.assessment import AssessmentType
from assessment_hub.schemas.auth import User
from assessment_hub.schemas.payloads import PayloadError, decode_payload
from assessment_hub.services import assessment_ai
from assessment_hub.storage import Storage

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analysis"])


def _load_payloads(storage: Storage, assessment_id: int) -> List[Dict[str, Any]]:
    responses = storage.get_responses_by_assessment(assessment_id)
    if not responses:
        raise ValidationFailedError("There are no responses to analyze for this assessment")
    try:
        return [decode_payload(r.data) for r in responses]
    except PayloadError as e:
        logger.error(f"Assessment {assessment_id} has an unreadable response: {e.message}")
        raise AppException(e.message, status_code=500, error_code="CORRUPTED_PAYLOAD")


def _parse_analysis(raw) -> AnalysisDocument:
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ValidationFailedError(f"Analysis is not valid JSON: {e.msg}")
    try:
        return AnalysisDocument.model_validate(raw)
    except ValidationError as e:
        raise ValidationFailedError("Invalid analysis data", errors=field_errors(e.errors()))


@router.post("/analysis", response_model=AnalysisResult, status_code=status.HTTP_201_CREATED)
def create_analysis(
    data: AnalysisCreate,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    """Store an analysis computed elsewhere."""
    get_owned_assessment(data.assessment_id, storage, current_user, "create analysis for")
    document = _parse_analysis(data.analysis)
    return storage.create_analysis_result(AnalysisResultInsert(
        assessment_id=data.assessment_id,
        analysis=document.model_dump_json(by_alias=True),
    ))


@router.get("/assessments/{assessment_id}/analysis", response_model=List[AnalysisResult])
def list_analysis_results(
    assessment_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    get_assessment_or_404(assessment_id, storage)
    return storage.get_analysis_results_by_assessment(assessment_id)


@router.post(
    "/assessments/{assessment_id}/ai-analysis",
    response_model=GeneratedAnalysis,
    status_code=status.HTTP_201_CREATED
)
@limiter.limit(settings.ai_rate_limit)
def generate_ai_analysis(
    request: Request,
    assessment_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    """
    Run the AI analysis over every stored response and persist the result.
    The enabled AI options and the assessment's custom prompt shape the request.
    """
    assessment = get_owned_assessment(assessment_id, storage, current_user, "generate analysis for")
    payloads = _load_payloads(storage, assessment_id)
    options = storage.get_ai_options_by_assessment(assessment_id)

    try:
        document = assessment_ai.analyze_assessment_data(
            AssessmentType(assessment.type_id),
            payloads,
            enabled_options=options,
            custom_prompt=assessment.ai_prompt,
        )
    except AppException:
        raise
    except Exception as e:
        logger.error(f"AI analysis failed for assessment {assessment_id}: {e}", exc_info=True)
        raise AIError("Failed to generate AI analysis", error=str(e))

    saved = storage.create_analysis_result(AnalysisResultInsert(
        assessment_id=assessment_id,
        analysis=document.model_dump_json(by_alias=True),
    ))
    logger.info(f"Stored AI analysis {saved.id} for assessment {assessment_id}")
    return GeneratedAnalysis(
        id=saved.id,
        assessment_id=assessment_id,
        results=document,
        generated_at=saved.generated_at,
    )


@router.post(
    "/assessments/{assessment_id}/visualization-recommendations",
    response_model=VisualizationRecommendations
)
@limiter.limit(settings.ai_rate_limit)
def visualization_recommendations(
    request: Request,
    assessment_id: int,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    assessment = get_owned_assessment(assessment_id, storage, current_user, "generate recommendations for")
    payloads = _load_payloads(storage, assessment_id)
    try:
        return assessment_ai.recommend_visualizations(AssessmentType(assessment.type_id), payloads)
    except AppException:
        raise
    except Exception as e:
        logger.error(f"Chart recommendations failed for assessment {assessment_id}: {e}", exc_info=True)
        raise AIError("Failed to generate visualization recommendations", error=str(e))


@router.post("/assessments/{assessment_id}/feedback-text", response_model=FeedbackText)
@limiter.limit(settings.ai_rate_limit)
def feedback_text(
    request: Request,
    assessment_id: int,
    data: FeedbackTextRequest,
    storage: Storage = Depends(get_storage),
    current_user: User = Depends(get_current_user)
):
    assessment = get_owned_assessment(assessment_id, storage, current_user, "generate feedback for")
    payloads = _load_payloads(storage, assessment_id)
    text = assessment_ai.generate_feedback_text(AssessmentType(assessment.type_id), data.aspect, payloads)
    return FeedbackText(aspect=data.aspect, text=text)
