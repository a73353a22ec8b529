"""
AI features for assessments: analysis summaries, chart recommendations and
narrative feedback text, all built on ``AIOrchestrator``.
"""
import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from assessment_hub.core import prompts
from assessment_hub.core.config import settings
from assessment_hub.core.exceptions import AIError, AIKillSwitchError
from assessment_hub.schemas.analysis import AnalysisDocument, VisualizationRecommendations
from assessment_hub.schemas.assessment import AIOption, AssessmentType
from assessment_hub.services.ai_orchestrator import AIDomain, AIOrchestrator

logger = logging.getLogger(__name__)


def build_analysis_prompt(
    assessment_type: AssessmentType,
    enabled_options: Iterable[str] = (),
    custom_prompt: Optional[str] = None,
) -> str:
    """System prompt: analyst persona, one instruction per enabled option, then the creator's own prompt."""
    parts = [prompts.get_prompt(
        prompts.ANALYSIS_SYSTEM_TEMPLATE,
        focus=prompts.ANALYST_FOCUS[assessment_type.slug],
        language=settings.ai.response_language,
    )]
    enabled = set(enabled_options)
    # Iterate the enum so instructions keep a stable order
    for option in AIOption:
        if option.value in enabled:
            parts.append(prompts.ANALYSIS_OPTION_INSTRUCTIONS[option.value])
    if custom_prompt:
        parts.append(custom_prompt.strip())
    return " ".join(parts)


def analyze_assessment_data(
    assessment_type: AssessmentType,
    payloads: List[Dict[str, Any]],
    enabled_options: Iterable[str] = (),
    custom_prompt: Optional[str] = None,
) -> AnalysisDocument:
    system_prompt = build_analysis_prompt(assessment_type, enabled_options, custom_prompt)
    user_prompt = prompts.get_prompt(
        prompts.ANALYSIS_USER_TEMPLATE,
        data=json.dumps(payloads, indent=2, ensure_ascii=False),
    )

    logger.info(f"Requesting {assessment_type.slug} analysis over {len(payloads)} responses")
    result = AIOrchestrator.analyze_text(
        system_prompt=system_prompt,
        user_content=user_prompt,
        temperature=0.5,
        domain=AIDomain.ANALYSIS,
    )
    try:
        return AnalysisDocument.model_validate(result)
    except ValidationError as e:
        logger.error(f"AI analysis did not match the expected shape: {e}")
        raise AIError("Failed to parse AI response.", error=str(e))


def recommend_visualizations(
    assessment_type: AssessmentType,
    payloads: List[Dict[str, Any]],
) -> VisualizationRecommendations:
    user_prompt = prompts.get_prompt(
        prompts.VISUALIZATION_USER_TEMPLATE,
        label=prompts.REPORT_LABEL[assessment_type.slug],
        language=settings.ai.response_language,
        data=json.dumps(payloads, indent=2, ensure_ascii=False),
    )
    result = AIOrchestrator.analyze_text(
        system_prompt=prompts.VISUALIZATION_SYSTEM,
        user_content=user_prompt,
        temperature=0.4,
        domain=AIDomain.VISUALIZATION,
    )
    try:
        return VisualizationRecommendations.model_validate(result)
    except ValidationError as e:
        logger.error(f"AI chart recommendations did not match the expected shape: {e}")
        raise AIError("Failed to parse AI response.", error=str(e))


def generate_feedback_text(
    assessment_type: AssessmentType,
    aspect: str,
    data: Any,
) -> str:
    """Narrative text for one aspect. Falls back to a fixed sentence if the model is unavailable."""
    prompt = prompts.get_prompt(
        prompts.FEEDBACK_TEXT_TEMPLATE,
        language=settings.ai.response_language,
        label=prompts.REPORT_LABEL[assessment_type.slug],
        aspect=aspect,
        data=json.dumps(data, indent=2, ensure_ascii=False),
    )
    try:
        text = AIOrchestrator.call_model(
            [{"role": "user", "content": prompt}],
            json_output=False,
            domain=AIDomain.FEEDBACK,
        )
    except (AIError, AIKillSwitchError) as e:
        logger.error(f"Feedback text generation failed: {e.message}")
        return prompts.FEEDBACK_TEXT_FALLBACK
    return text.strip() or prompts.FEEDBACK_TEXT_FALLBACK
