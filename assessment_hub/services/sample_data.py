"""
Synthetic responses for demos and manual testing.

Every generated payload is valid for its assessment type, so it goes
through the same boundary validation as a real submission.
"""
import logging
import random
from typing import Any, Dict, List, Optional

from assessment_hub.schemas.assessment import Assessment, AssessmentType
from assessment_hub.schemas.auth import User
from assessment_hub.schemas.payloads import encode_payload, parse_response_payload
from assessment_hub.schemas.response import AssessmentResponse, ResponseInsert
from assessment_hub.storage import Storage

logger = logging.getLogger(__name__)

PERFORMANCE_CRITERIA = ("productivity", "quality", "teamwork", "communication", "initiative")
CLIMATE_QUESTIONS = ("leadership", "communication", "recognition", "workLifeBalance", "growth", "environment")
FEEDBACK_COMPETENCIES = ("leadership", "collaboration", "communication", "problemSolving", "accountability")

SAMPLE_COMMENTS = (
    "Consistent delivery over the period.",
    "Would benefit from clearer goals.",
    "Great collaboration with other teams.",
    "Workload has been heavy lately.",
    "Communication improved noticeably.",
    None,
)


def _scores(rng: random.Random, keys) -> Dict[str, int]:
    # Skewed towards the upper half, like most real survey data
    return {key: rng.choices((1, 2, 3, 4, 5), weights=(1, 2, 4, 6, 4))[0] for key in keys}


def build_sample_payload(
    assessment_type: AssessmentType,
    respondent: User,
    participants: List[User],
    rng: random.Random,
) -> Dict[str, Any]:
    payload: Dict[str, Any]
    if assessment_type == AssessmentType.PERFORMANCE:
        payload = {"scores": _scores(rng, PERFORMANCE_CRITERIA), "evaluateeId": respondent.id}
    elif assessment_type == AssessmentType.CLIMATE:
        payload = {"answers": _scores(rng, CLIMATE_QUESTIONS)}
    else:
        others = [p for p in participants if p.id != respondent.id]
        if others:
            evaluatee = rng.choice(others)
            relationship = rng.choice(("peer", "manager", "direct_report"))
        else:
            evaluatee, relationship = respondent, "self"
        payload = {
            "evaluateeId": evaluatee.id,
            "relationship": relationship,
            "scores": _scores(rng, FEEDBACK_COMPETENCIES),
        }

    comment = rng.choice(SAMPLE_COMMENTS)
    if comment:
        payload["comments"] = comment
    return payload


def generate_sample_responses(
    storage: Storage,
    assessment: Assessment,
    participants: List[User],
    count: int,
    seed: Optional[int] = None,
) -> List[AssessmentResponse]:
    """Creates ``count`` responses, cycling through ``participants`` as respondents."""
    if not participants:
        raise ValueError("Assessment has no participants")

    rng = random.Random(seed)
    assessment_type = AssessmentType(assessment.type_id)
    created = []
    for i in range(count):
        respondent = participants[i % len(participants)]
        payload = build_sample_payload(assessment_type, respondent, participants, rng)
        parse_response_payload(assessment_type, payload)
        created.append(storage.create_response(ResponseInsert(
            assessment_id=assessment.id,
            user_id=respondent.id,
            data=encode_payload(payload),
        )))

    logger.info(f"Generated {len(created)} sample responses for assessment {assessment.id}")
    return created
