from fastapi import status


def test_dashboard_counts_and_recent(client, owner, other_user, auth_headers, create_assessment):
    created = [
        create_assessment(owner, name=f"Assessment {i}", typeId=type_id)
        for i, type_id in enumerate((1, 1, 2, 3, 3, 3, 2))
    ]
    create_assessment(other_user, name="Not mine", typeId=1)

    response = client.get("/api/dashboard", headers=auth_headers(owner))
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["assessmentCounts"] == {"performance": 2, "climate": 2, "feedback360": 3, "total": 7}

    recent = body["recentAssessments"]
    assert len(recent) == 5
    # Newest first
    assert [a["id"] for a in recent] == [a["id"] for a in reversed(created)][:5]


def test_dashboard_empty(client, owner, auth_headers):
    response = client.get("/api/dashboard", headers=auth_headers(owner))
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["assessmentCounts"]["total"] == 0
    assert body["recentAssessments"] == []
