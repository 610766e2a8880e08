import pytest

from projecthub.auth.deps import get_bearer_token, require_faculty, require_student, require_fourth_year, require_role
from projecthub.core.errors import APIError
from projecthub.models.user import UserRole
from projecthub.schemas.auth import Principal


class FakeRequest:
    def __init__(self, headers):
        self.headers = headers


def principal(role: UserRole) -> Principal:
    return Principal(id=1, name="Someone", email="someone@college.edu", role=role)


def test_bearer_token_extraction():
    assert get_bearer_token(FakeRequest({"Authorization": "Bearer abc.def"})) == "abc.def"
    assert get_bearer_token(FakeRequest({"Authorization": "bearer xyz"})) == "xyz"
    assert get_bearer_token(FakeRequest({"Authorization": "Basic abc"})) is None
    assert get_bearer_token(FakeRequest({})) is None


@pytest.mark.parametrize("gate, allowed", [
    (require_faculty, {UserRole.FACULTY}),
    (require_fourth_year, {UserRole.STUDENT_FOURTH}),
    (require_student, {UserRole.STUDENT_THIRD, UserRole.STUDENT_FOURTH}),
])
def test_prebuilt_role_gates(gate, allowed):
    for role in UserRole:
        if role in allowed:
            assert gate(principal(role)).role == role
        else:
            with pytest.raises(APIError) as exc:
                gate(principal(role))
            assert exc.value.status_code == 403
            assert exc.value.code.value == "INSUFFICIENT_PERMISSIONS"


def test_role_gate_message_names_required_roles():
    gate = require_role(UserRole.STUDENT_THIRD, UserRole.STUDENT_FOURTH)

    with pytest.raises(APIError) as exc:
        gate(principal(UserRole.FACULTY))

    assert exc.value.message == "Access denied. Required role: student_third or student_fourth"


def test_role_gate_without_principal_is_unauthorized():
    with pytest.raises(APIError) as exc:
        require_faculty(None)
    assert exc.value.status_code == 401


def test_faculty_only_route_rejects_students(client, junior, senior, headers):
    for user in (junior, senior):
        response = client.get("/api/analytics", headers=headers(user))
        assert response.status_code == 403
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "INSUFFICIENT_PERMISSIONS"
        assert "faculty" in body["message"]


def test_protected_route_requires_token(client):
    response = client.get("/api/projects")

    assert response.status_code == 401
    assert response.json()["error"] == "UNAUTHORIZED"


def test_unknown_route_uses_envelope(client):
    response = client.get("/api/nowhere")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_health(client):
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.json()["status"] == "OK"
