from __future__ import annotations

import pytest
from conftest import DeterministicHasher, InMemoryUserRepository, make_user

from umms.application.use_cases.users.login_user import LoginUserUseCase
from umms.application.use_cases.users.signup_user import SignupCommand, SignupUserUseCase
from umms.domain.users.entities import Role, User, UserQuery
from umms.domain.users.exceptions import InvalidCredentialsError, UserAlreadyExistsError
from umms.domain.users.validation import require_fields
from umms.shared.errors import ValidationError


class StubTokens:
    def __init__(self) -> None:
        self.issued: list[str] = []

    def issue(self, user: User) -> str:
        self.issued.append(user.id)
        return f"token-{user.id}"

    def verify(self, token: str):  # pragma: no cover
        raise NotImplementedError


def _signup(users: InMemoryUserRepository, hasher: DeterministicHasher, **overrides) -> User:
    fields = {
        "email": "a@b.com",
        "password": "secret1",
        "first_name": "A",
        "last_name": "B",
    }
    fields.update(overrides)
    return SignupUserUseCase(users=users, password_hasher=hasher).execute(SignupCommand(**fields))


def test_signup_defaults_role_and_derives_username(users, hasher) -> None:
    user = _signup(users, hasher)

    assert user.role is Role.WORKER
    assert user.username == "a"
    assert user.password_hash == "hashed:secret1"
    assert users.find_by_email("a@b.com") == user


def test_signup_normalizes_email(users, hasher) -> None:
    user = _signup(users, hasher, email="  Ada@Example.COM ")

    assert user.email == "ada@example.com"
    assert user.username == "ada"


def test_signup_accepts_explicit_role(users, hasher) -> None:
    assert _signup(users, hasher, role="Dispatch").role is Role.DISPATCH


@pytest.mark.parametrize(
    ("overrides", "expected"),
    [
        ({"first_name": None}, "Email, password, firstName, and lastName are required"),
        ({"password": ""}, "Email, password, firstName, and lastName are required"),
        ({"email": "not-an-email"}, "Invalid email format"),
        ({"password": "12345"}, "Password must be at least 6 characters long"),
        ({"role": "Manager"}, "Role must be one of: Admin, Supervisor, Worker, Dispatch, Sales"),
    ],
)
def test_signup_rejects_invalid_input(users, hasher, overrides, expected) -> None:
    with pytest.raises(ValidationError) as exc_info:
        _signup(users, hasher, **overrides)

    assert exc_info.value.error == expected
    assert exc_info.value.status == 400
    assert users.search(UserQuery()).total == 0


def test_signup_rejects_duplicate_email(users, hasher) -> None:
    _signup(users, hasher)

    with pytest.raises(UserAlreadyExistsError) as exc_info:
        _signup(users, hasher, email="A@B.com", first_name="Other")

    assert exc_info.value.to_dict() == {"error": "User with this email already exists"}


def test_login_returns_token_for_valid_credentials(users, hasher) -> None:
    user = users.add(make_user())
    tokens = StubTokens()

    result = LoginUserUseCase(users=users, tokens=tokens, password_hasher=hasher).execute(
        "A@B.com", "secret1"
    )

    assert result.token == f"token-{user.id}"
    assert result.user == user
    assert tokens.issued == [user.id]


def test_login_failures_are_indistinguishable(users, hasher) -> None:
    users.add(make_user())
    use_case = LoginUserUseCase(users=users, tokens=StubTokens(), password_hasher=hasher)

    with pytest.raises(InvalidCredentialsError) as wrong_password:
        use_case.execute("a@b.com", "wrong-password")
    with pytest.raises(InvalidCredentialsError) as unknown_email:
        use_case.execute("nobody@b.com", "secret1")

    assert wrong_password.value.to_dict() == unknown_email.value.to_dict()
    assert wrong_password.value.status == unknown_email.value.status == 400


def test_login_requires_both_fields(users, hasher) -> None:
    use_case = LoginUserUseCase(users=users, tokens=StubTokens(), password_hasher=hasher)

    with pytest.raises(ValidationError) as exc_info:
        use_case.execute("a@b.com", None)

    assert exc_info.value.error == "Email & password required"


def test_require_fields_returns_values_or_raises() -> None:
    assert require_fields("missing", "a@b.com", "secret1") == ("a@b.com", "secret1")
    with pytest.raises(ValidationError) as exc_info:
        require_fields("missing", "a@b.com", "")

    assert exc_info.value.code == "missing_fields"
