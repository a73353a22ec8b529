import json

import pytest
from fastapi import status

from assessment_hub.core.exceptions import AIError, AIKillSwitchError
from assessment_hub.schemas.analysis import AnalysisDocument, VisualizationRecommendations
from assessment_hub.services import assessment_ai


@pytest.fixture
def assessment_with_responses(client, owner, auth_headers, create_assessment):
    assessment = create_assessment(
        owner,
        typeId=2,
        aiPrompt="Compare teams",
        aiAnalysis=["strengths", "patterns"],
    )
    for score in (3, 5):
        response = client.post("/api/responses", headers=auth_headers(owner), json={
            "assessmentId": assessment["id"],
            "data": {"answers": {"leadership": score}},
        })
        assert response.status_code == status.HTTP_201_CREATED
    return assessment


def test_ai_analysis_without_responses(client, owner, auth_headers, create_assessment, storage):
    assessment = create_assessment(owner)
    response = client.post(f"/api/assessments/{assessment['id']}/ai-analysis", headers=auth_headers(owner))
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert storage.get_analysis_results_by_assessment(assessment["id"]) == []


def test_ai_analysis_success(client, owner, auth_headers, assessment_with_responses, monkeypatch, storage):
    calls = {}

    def fake_analyze(assessment_type, payloads, enabled_options=(), custom_prompt=None):
        calls.update(type=assessment_type, payloads=payloads, options=enabled_options, prompt=custom_prompt)
        return AnalysisDocument(summary="Healthy climate", strengths=["Leadership"])

    monkeypatch.setattr(assessment_ai, "analyze_assessment_data", fake_analyze)

    assessment_id = assessment_with_responses["id"]
    response = client.post(f"/api/assessments/{assessment_id}/ai-analysis", headers=auth_headers(owner))
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["assessmentId"] == assessment_id
    assert body["results"]["summary"] == "Healthy climate"
    assert body["results"]["strengths"] == ["Leadership"]
    assert "generatedAt" in body

    assert calls["type"] == 2
    assert calls["payloads"] == [{"answers": {"leadership": 3}}, {"answers": {"leadership": 5}}]
    assert sorted(calls["options"]) == ["patterns", "strengths"]
    assert calls["prompt"] == "Compare teams"

    stored = storage.get_analysis_results_by_assessment(assessment_id)
    assert [r.id for r in stored] == [body["id"]]
    assert json.loads(stored[0].analysis)["summary"] == "Healthy climate"

    listed = client.get(f"/api/assessments/{assessment_id}/analysis", headers=auth_headers(owner))
    assert listed.status_code == status.HTTP_200_OK
    assert len(listed.json()) == 1


def test_ai_analysis_unexpected_failure(client, owner, auth_headers, assessment_with_responses, monkeypatch, storage):
    def broken(*args, **kwargs):
        raise RuntimeError("upstream exploded")

    monkeypatch.setattr(assessment_ai, "analyze_assessment_data", broken)

    assessment_id = assessment_with_responses["id"]
    response = client.post(f"/api/assessments/{assessment_id}/ai-analysis", headers=auth_headers(owner))
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    body = response.json()
    assert body["message"] == "Failed to generate AI analysis"
    assert body["error"] == "upstream exploded"
    assert storage.get_analysis_results_by_assessment(assessment_id) == []


def test_ai_analysis_ai_error_passthrough(client, owner, auth_headers, assessment_with_responses, monkeypatch):
    def failing(*args, **kwargs):
        raise AIError("AI service failed", error="HTTP 502")

    monkeypatch.setattr(assessment_ai, "analyze_assessment_data", failing)
    response = client.post(
        f"/api/assessments/{assessment_with_responses['id']}/ai-analysis", headers=auth_headers(owner)
    )
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"message": "AI service failed", "error": "HTTP 502"}


def test_ai_analysis_kill_switch(client, owner, auth_headers, assessment_with_responses, monkeypatch):
    def disabled(*args, **kwargs):
        raise AIKillSwitchError()

    monkeypatch.setattr(assessment_ai, "analyze_assessment_data", disabled)
    response = client.post(
        f"/api/assessments/{assessment_with_responses['id']}/ai-analysis", headers=auth_headers(owner)
    )
    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


def test_ai_analysis_only_for_creator(client, other_user, auth_headers, assessment_with_responses):
    response = client.post(
        f"/api/assessments/{assessment_with_responses['id']}/ai-analysis", headers=auth_headers(other_user)
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_ai_analysis_missing_assessment(client, owner, auth_headers):
    response = client.post("/api/assessments/999/ai-analysis", headers=auth_headers(owner))
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_visualization_recommendations(client, owner, auth_headers, assessment_with_responses, monkeypatch):
    def fake_recommend(assessment_type, payloads):
        return VisualizationRecommendations.model_validate({
            "recommendations": [{"chartType": "bar", "title": "Leadership", "dataFields": ["leadership"]}]
        })

    monkeypatch.setattr(assessment_ai, "recommend_visualizations", fake_recommend)
    response = client.post(
        f"/api/assessments/{assessment_with_responses['id']}/visualization-recommendations",
        headers=auth_headers(owner),
    )
    assert response.status_code == status.HTTP_200_OK
    recommendation = response.json()["recommendations"][0]
    assert recommendation["chartType"] == "bar"
    assert recommendation["dataFields"] == ["leadership"]


def test_visualization_recommendations_without_responses(client, owner, auth_headers, create_assessment):
    assessment = create_assessment(owner)
    response = client.post(
        f"/api/assessments/{assessment['id']}/visualization-recommendations",
        headers=auth_headers(owner),
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_feedback_text(client, owner, auth_headers, assessment_with_responses, monkeypatch):
    monkeypatch.setattr(
        assessment_ai, "generate_feedback_text", lambda assessment_type, aspect, data: f"Text about {aspect}"
    )
    response = client.post(
        f"/api/assessments/{assessment_with_responses['id']}/feedback-text",
        headers=auth_headers(owner),
        json={"aspect": "leadership"},
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"aspect": "leadership", "text": "Text about leadership"}


def test_store_precomputed_analysis(client, owner, auth_headers, create_assessment):
    assessment = create_assessment(owner)
    response = client.post("/api/analysis", headers=auth_headers(owner), json={
        "assessmentId": assessment["id"],
        "analysis": json.dumps({"summary": "Manual review", "suggestions": ["More 1:1s"]}),
    })
    assert response.status_code == status.HTTP_201_CREATED
    stored = json.loads(response.json()["analysis"])
    assert stored["summary"] == "Manual review"
    assert stored["suggestions"] == ["More 1:1s"]


def test_store_analysis_requires_summary(client, owner, auth_headers, create_assessment):
    assessment = create_assessment(owner)
    response = client.post("/api/analysis", headers=auth_headers(owner), json={
        "assessmentId": assessment["id"],
        "analysis": {"patterns": ["x"]},
    })
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_store_analysis_permissions(client, owner, other_user, auth_headers, create_assessment):
    assessment = create_assessment(owner)
    body = {"assessmentId": assessment["id"], "analysis": {"summary": "x"}}
    assert client.post("/api/analysis", headers=auth_headers(other_user), json=body).status_code == 403

    body["assessmentId"] = 999
    assert client.post("/api/analysis", headers=auth_headers(owner), json=body).status_code == 404


def test_list_analysis_missing_assessment(client, owner, auth_headers):
    response = client.get("/api/assessments/999/analysis", headers=auth_headers(owner))
    assert response.status_code == status.HTTP_404_NOT_FOUND
