from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest
from conftest import TEST_SECRET, make_user

from umms.application.auth_gate import (
    ADMIN_ONLY,
    ADMIN_OR_SUPERVISOR,
    ADMIN_SUPERVISOR_OR_WORKER,
    AuthGate,
    RoleGuard,
    extract_bearer_token,
)
from umms.application.services.token_service import JwtTokenService
from umms.domain.users.entities import Identity, Role


def _identity(role: str) -> Identity:
    now = datetime.now(UTC)
    return Identity(
        user_id="u-1",
        email="a@b.com",
        role=role,
        issued_at=now,
        expires_at=now + timedelta(hours=1),
    )


class ExplodingTokens:
    def issue(self, user):  # pragma: no cover
        raise NotImplementedError

    def verify(self, token: str) -> Identity:
        raise RuntimeError("key store unavailable")


@pytest.mark.parametrize(
    ("header", "expected"),
    [
        (None, None),
        ("", None),
        ("Bearer", None),
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("Token abc", "abc"),
        ("Bearer  spaced   extra", "spaced"),
    ],
)
def test_extract_bearer_token(header, expected) -> None:
    assert extract_bearer_token(header) == expected


def test_gate_accepts_valid_token() -> None:
    tokens = JwtTokenService(TEST_SECRET)
    user = make_user(role=Role.ADMIN)

    result = AuthGate(tokens).authenticate(f"Bearer {tokens.issue(user)}")

    assert result.ok
    assert result.identity is not None
    assert result.identity.user_id == user.id
    assert result.identity.role == "Admin"


def test_gate_reports_missing_credential() -> None:
    result = AuthGate(JwtTokenService(TEST_SECRET)).authenticate(None)

    assert not result.ok
    assert result.failure is not None
    assert result.failure.status == 401
    assert result.failure.to_dict() == {
        "error": "Access token required",
        "message": "Please provide a valid authentication token",
    }


def test_gate_reports_invalid_credential() -> None:
    result = AuthGate(JwtTokenService(TEST_SECRET)).authenticate("Bearer nonsense")

    assert result.failure is not None
    assert result.failure.status == 403
    assert result.failure.to_dict() == {
        "error": "Invalid token",
        "message": "The provided token is invalid or expired",
    }


def test_gate_reports_expired_credential_as_invalid() -> None:
    past = datetime.now(UTC) - timedelta(hours=2)
    stale = JwtTokenService(TEST_SECRET, clock=lambda: past).issue(make_user())

    result = AuthGate(JwtTokenService(TEST_SECRET)).authenticate(f"Bearer {stale}")

    assert result.failure is not None
    assert result.failure.status == 403


def test_gate_reports_unexpected_failure_as_internal() -> None:
    result = AuthGate(ExplodingTokens()).authenticate("Bearer whatever")

    assert result.failure is not None
    assert result.failure.status == 500
    assert result.failure.to_dict() == {
        "error": "Token verification failed",
        "message": "Failed to verify authentication token",
        "details": "RuntimeError",
    }


def test_optional_authentication_never_fails() -> None:
    tokens = JwtTokenService(TEST_SECRET)
    gate = AuthGate(tokens)

    assert gate.authenticate_optional(None) is None
    assert gate.authenticate_optional("Bearer nonsense") is None
    assert AuthGate(ExplodingTokens()).authenticate_optional("Bearer x") is None
    identity = gate.authenticate_optional(f"Bearer {tokens.issue(make_user())}")
    assert identity is not None and identity.user_id == "u-1"


def test_role_guard_admits_listed_roles_only() -> None:
    assert ADMIN_OR_SUPERVISOR.check(_identity("Supervisor")) is None

    failure = ADMIN_OR_SUPERVISOR.check(_identity("Worker"))

    assert failure is not None
    assert failure.status == 403
    assert failure.to_dict() == {
        "error": "Insufficient permissions",
        "message": "This endpoint requires one of these roles: Admin, Supervisor",
    }


def test_role_guard_has_no_hierarchy() -> None:
    guard = RoleGuard([Role.WORKER])

    assert guard.check(_identity("Worker")) is None
    assert guard.check(_identity("Admin")) is not None


def test_role_guard_requires_identity() -> None:
    failure = ADMIN_ONLY.check(None)

    assert failure is not None
    assert failure.status == 401
    assert failure.to_dict() == {
        "error": "Authentication required",
        "message": "This endpoint requires authentication",
    }


def test_role_guard_normalizes_and_deduplicates() -> None:
    guard = RoleGuard(["Admin", Role.ADMIN, "Sales"])

    assert guard.roles == ("Admin", "Sales")
    assert ADMIN_SUPERVISOR_OR_WORKER.roles == ("Admin", "Supervisor", "Worker")


def test_role_guard_rejects_unknown_or_empty_roles() -> None:
    with pytest.raises(ValueError):
        RoleGuard([])
    with pytest.raises(ValueError):
        RoleGuard(["Manager"])


def test_role_guard_rejects_roles_outside_the_enumeration() -> None:
    assert ADMIN_ONLY.check(_identity("admin")) is not None
