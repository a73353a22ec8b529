import json

from fastapi import status


def test_climate_survey_end_to_end(client, owner, make_user, auth_headers, create_assessment):
    participants = [make_user(f"employee{i}") for i in range(3)]
    assessment = create_assessment(
        owner,
        name="Clima Q1",
        typeId=2,
        participants=[p.id for p in participants],
    )

    submitted = []
    for i, participant in enumerate(participants):
        payload = {"answers": {"leadership": i + 2, "growth": 5}, "comments": f"answer {i}"}
        # Alternate between an object and a JSON string for `data`
        data = payload if i % 2 == 0 else json.dumps(payload)
        response = client.post("/api/responses", headers=auth_headers(participant), json={
            "assessmentId": assessment["id"],
            "data": data,
        })
        assert response.status_code == status.HTTP_201_CREATED, response.text
        assert response.json()["userId"] == participant.id
        submitted.append(payload)

    response = client.get(f"/api/assessments/{assessment['id']}/responses", headers=auth_headers(owner))
    assert response.status_code == status.HTTP_200_OK
    records = response.json()
    assert len(records) == 3
    assert [json.loads(r["data"]) for r in records] == submitted
    assert [r["userId"] for r in records] == [p.id for p in participants]


def test_response_payload_is_validated_by_type(client, owner, auth_headers, create_assessment):
    assessment = create_assessment(owner, typeId=3)
    response = client.post("/api/responses", headers=auth_headers(owner), json={
        "assessmentId": assessment["id"],
        "data": {"scores": {"leadership": 4}},
    })
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    body = response.json()
    assert body["message"] == "Response data does not match the assessment type"
    assert {"evaluateeId", "relationship"} <= {e["field"] for e in body["errors"]}


def test_response_values_are_not_coerced(client, storage, owner, auth_headers, create_assessment):
    assessment = create_assessment(owner, typeId=3)
    response = client.post("/api/responses", headers=auth_headers(owner), json={
        "assessmentId": assessment["id"],
        "data": {"evaluateeId": "7", "relationship": "peer", "scores": {"lead": "4", "team": True}},
    })
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    fields = {e["field"] for e in response.json()["errors"]}
    assert {"evaluateeId", "scores.lead", "scores.team"} <= fields
    assert storage.get_responses_by_assessment(assessment["id"]) == []


def test_response_with_malformed_json(client, owner, auth_headers, create_assessment):
    assessment = create_assessment(owner)
    response = client.post("/api/responses", headers=auth_headers(owner), json={
        "assessmentId": assessment["id"],
        "data": "{broken",
    })
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_response_for_missing_assessment(client, owner, auth_headers):
    response = client.post("/api/responses", headers=auth_headers(owner), json={
        "assessmentId": 999,
        "data": {"scores": {"quality": 3}},
    })
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_only_creator_lists_responses(client, owner, other_user, auth_headers, create_assessment):
    assessment = create_assessment(owner)
    response = client.get(f"/api/assessments/{assessment['id']}/responses", headers=auth_headers(other_user))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_responses_survive_assessment_delete(client, owner, auth_headers, create_assessment, storage):
    assessment = create_assessment(owner)
    client.post("/api/responses", headers=auth_headers(owner), json={
        "assessmentId": assessment["id"],
        "data": {"scores": {"quality": 3}},
    })
    client.delete(f"/api/assessments/{assessment['id']}", headers=auth_headers(owner))
    assert len(storage.get_responses_by_assessment(assessment["id"])) == 1


def test_generate_test_responses(client, owner, make_user, auth_headers, create_assessment):
    participants = [make_user(f"p{i}") for i in range(2)]
    assessment = create_assessment(owner, typeId=3, participants=[p.id for p in participants])

    response = client.post(
        f"/api/assessments/{assessment['id']}/generate-test-responses",
        headers=auth_headers(owner),
        json={"count": 4},
    )
    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["count"] == 4
    assert len(body["responses"]) == 4
    assert {r["userId"] for r in body["responses"]} == {p.id for p in participants}

    listed = client.get(f"/api/assessments/{assessment['id']}/responses", headers=auth_headers(owner)).json()
    assert len(listed) == 4
    for record in listed:
        data = json.loads(record["data"])
        assert data["relationship"] in ("self", "peer", "manager", "direct_report")


def test_generate_test_responses_default_count(client, owner, auth_headers, create_assessment):
    assessment = create_assessment(owner, participants=[owner.id])
    response = client.post(
        f"/api/assessments/{assessment['id']}/generate-test-responses",
        headers=auth_headers(owner),
    )
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["count"] == 5


def test_generate_test_responses_needs_participants(client, owner, auth_headers, create_assessment):
    assessment = create_assessment(owner)
    response = client.post(
        f"/api/assessments/{assessment['id']}/generate-test-responses",
        headers=auth_headers(owner),
        json={"count": 2},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_generate_test_responses_count_is_bounded(client, owner, auth_headers, create_assessment):
    assessment = create_assessment(owner, participants=[owner.id])
    response = client.post(
        f"/api/assessments/{assessment['id']}/generate-test-responses",
        headers=auth_headers(owner),
        json={"count": 50},
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
