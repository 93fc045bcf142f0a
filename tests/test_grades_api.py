"""
Tests for grade endpoints
"""


def _submit(client, grade, comment="", member_id="12345678", sheet_id=1):
    return client.post(
        "/api/grades",
        json={"memberId": member_id, "signupSheetId": sheet_id, "grade": grade, "comment": comment},
    )


def test_first_submission_is_saved(client):
    response = _submit(client, 88, "Solid demo")
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Grade saved successfully"
    assert "originalGrade" not in body
    assert body["grade"]["grade"] == 88
    assert body["grade"]["comment"] == "Solid demo"
    assert body["grade"]["gradedAt"].endswith("Z")


def test_resubmission_overwrites_and_reports_previous(client):
    _submit(client, 70)
    response = _submit(client, 95, "Regraded")
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Grade updated successfully"
    assert body["originalGrade"] == 70

    stored = client.get("/api/grades/12345678/1").json()
    assert stored["grade"] == 95
    assert stored["comment"] == "Regraded"


def test_previous_grade_of_zero_is_reported(client):
    _submit(client, 0)
    assert _submit(client, 50).json()["originalGrade"] == 0


def test_grades_are_keyed_by_member_and_sheet(client):
    _submit(client, 60, sheet_id=1)
    _submit(client, 90, sheet_id=2)
    _submit(client, 75, member_id="87654321", sheet_id=1)
    assert client.get("/api/grades/12345678/1").json()["grade"] == 60
    assert client.get("/api/grades/12345678/2").json()["grade"] == 90
    assert client.get("/api/grades/87654321/1").json()["grade"] == 75


def test_grade_values_are_clamped(client):
    assert _submit(client, 250).json()["grade"]["grade"] == 100
    assert _submit(client, "abc", member_id="87654321").json()["grade"]["grade"] == 0


def test_missing_grade_is_404(client):
    response = client.get("/api/grades/12345678/3")
    assert response.status_code == 404
    assert response.json() == {"error": "Grade not found"}
