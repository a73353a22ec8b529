import random

import pytest

from assessment_hub.schemas.assessment import AssessmentInsert, AssessmentType
from assessment_hub.schemas.payloads import decode_payload, parse_response_payload
from assessment_hub.services.sample_data import build_sample_payload, generate_sample_responses


@pytest.mark.parametrize("assessment_type", list(AssessmentType))
def test_sample_payloads_are_valid(assessment_type, owner, other_user):
    rng = random.Random(7)
    for respondent in (owner, other_user):
        payload = build_sample_payload(assessment_type, respondent, [owner, other_user], rng)
        assert parse_response_payload(assessment_type, payload) == payload


def test_single_participant_360_is_self_review(owner):
    payload = build_sample_payload(AssessmentType.FEEDBACK_360, owner, [owner], random.Random(1))
    assert payload["relationship"] == "self"
    assert payload["evaluateeId"] == owner.id


def test_generate_sample_responses_cycles_respondents(storage, owner, other_user):
    assessment = storage.create_assessment(AssessmentInsert(
        name="Performance H1",
        type_id=1,
        start_date="2024-01-01",
        end_date="2024-06-30",
        created_by=owner.id,
    ))
    created = generate_sample_responses(storage, assessment, [owner, other_user], count=3, seed=42)

    assert [r.user_id for r in created] == [owner.id, other_user.id, owner.id]
    assert storage.get_responses_by_assessment(assessment.id) == created
    for response in created:
        assert decode_payload(response.data)["scores"]


def test_generate_sample_responses_is_reproducible(storage, owner):
    assessment = storage.create_assessment(AssessmentInsert(
        name="Clima", type_id=2, start_date="2024-01-01", end_date="2024-01-31", created_by=owner.id,
    ))
    first = generate_sample_responses(storage, assessment, [owner], count=2, seed=5)
    second = generate_sample_responses(storage, assessment, [owner], count=2, seed=5)
    assert [r.data for r in first] == [r.data for r in second]


def test_generate_sample_responses_requires_participants(storage, owner):
    assessment = storage.create_assessment(AssessmentInsert(
        name="Empty", type_id=2, start_date="2024-01-01", end_date="2024-01-31", created_by=owner.id,
    ))
    with pytest.raises(ValueError):
        generate_sample_responses(storage, assessment, [], count=1)
