"""
Tests for the teacher session endpoints.
"""


class TestSessionEndpoints:

    def test_logged_out_by_default(self, client):
        data = client.get("/session").json()
        assert data["logged_in"] is False
        assert data["teacher_name"] == "Guest"
        assert data["info"] == "Not logged in"

    def test_login_and_logout(self, client, teacher):
        response = client.post("/session/login", json={"employee_id": "T1001"})

        assert response.status_code == 200
        data = response.json()
        assert data["logged_in"] is True
        assert data["employee_id"] == "T1001"
        assert data["teacher_name"] == "Ada Lovelace"

        data = client.post("/session/logout").json()
        assert data["logged_in"] is False

    def test_login_unknown_teacher_returns_404(self, client):
        response = client.post("/session/login", json={"employee_id": "NOPE"})
        assert response.status_code == 404
