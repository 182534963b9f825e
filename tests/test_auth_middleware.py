from __future__ import annotations

import pytest
from conftest import TEST_SECRET, make_user
from flask import Flask, g, jsonify

from umms.application.auth_gate import AuthGate
from umms.application.services.token_service import JwtTokenService
from umms.domain.users.entities import Role
from umms.interfaces.http.middleware.auth import AuthMiddleware
from umms.shared.middleware.error_handler import configure_error_handling

TOKENS = JwtTokenService(TEST_SECRET)


@pytest.fixture()
def guarded_app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    auth = AuthMiddleware(AuthGate(TOKENS))

    def whoami(identity):
        return jsonify({"userId": identity.user_id, "role": identity.role, "g": g.user_id})

    def floor_report(identity):
        return jsonify({"role": identity.role})

    def unauthenticated_admin_view(identity=None):  # pragma: no cover
        return jsonify({})

    app.add_url_rule("/me", "me", auth.authenticate_token(whoami))
    app.add_url_rule(
        "/supervisor", "supervisor", auth.authenticate_token(auth.require_supervisor(floor_report))
    )
    app.add_url_rule(
        "/worker", "worker", auth.authenticate_token(auth.require_worker(floor_report))
    )
    app.add_url_rule(
        "/sales", "sales", auth.authenticate_token(auth.require_role(["Sales"])(floor_report))
    )
    app.add_url_rule("/no-gate", "no_gate", auth.require_admin(unauthenticated_admin_view))
    return app


def _headers(role: Role) -> dict[str, str]:
    return {"Authorization": f"Bearer {TOKENS.issue(make_user(user_id=f'id-{role}', role=role))}"}


def test_identity_is_passed_to_view(guarded_app: Flask) -> None:
    with guarded_app.test_client() as client:
        response = client.get("/me", headers=_headers(Role.WORKER))

    assert response.get_json() == {"userId": "id-Worker", "role": "Worker", "g": "id-Worker"}


@pytest.mark.parametrize(
    ("path", "role", "status"),
    [
        ("/supervisor", Role.ADMIN, 200),
        ("/supervisor", Role.SUPERVISOR, 200),
        ("/supervisor", Role.WORKER, 403),
        ("/worker", Role.WORKER, 200),
        ("/worker", Role.DISPATCH, 403),
        ("/sales", Role.SALES, 200),
        ("/sales", Role.ADMIN, 403),
    ],
)
def test_role_allow_lists(guarded_app: Flask, path: str, role: Role, status: int) -> None:
    with guarded_app.test_client() as client:
        response = client.get(path, headers=_headers(role))

    assert response.status_code == status


def test_forbidden_message_lists_allowed_roles(guarded_app: Flask) -> None:
    with guarded_app.test_client() as client:
        response = client.get("/worker", headers=_headers(Role.SALES))

    assert response.get_json() == {
        "error": "Insufficient permissions",
        "message": "This endpoint requires one of these roles: Admin, Supervisor, Worker",
    }


def test_role_check_without_authentication_returns_401(guarded_app: Flask) -> None:
    with guarded_app.test_client() as client:
        response = client.get("/no-gate")

    assert response.status_code == 401
    assert response.get_json()["error"] == "Authentication required"


def test_missing_token_stops_before_role_check(guarded_app: Flask) -> None:
    with guarded_app.test_client() as client:
        response = client.get("/supervisor", headers={"Authorization": "Bearer"})

    assert response.status_code == 401
    assert response.get_json()["error"] == "Access token required"
