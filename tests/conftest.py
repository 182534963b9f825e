from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

from umms.app import create_app
from umms.domain.users.entities import Role, User, UserPage, UserQuery
from umms.domain.users.exceptions import UserAlreadyExistsError
from umms.domain.users.repositories import PasswordHasher, UserRepository
from umms.infrastructure.db import Database
from umms.shared.config import AppConfig, DatabaseConfig

TEST_SECRET = "test-signing-key-0123456789-abcdefghijklmnop"


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    def find_by_email(self, email: str) -> User | None:
        return next((u for u in self._users.values() if u.email == email.lower()), None)

    def find_by_id(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    def find_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    def add(self, user: User) -> User:
        if self.find_by_email(user.email):
            raise UserAlreadyExistsError()
        self._users[user.id] = user
        return user

    def update(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def delete(self, user_id: str) -> bool:
        return self._users.pop(user_id, None) is not None

    def search(self, query: UserQuery) -> UserPage:
        users = list(self._users.values())
        if query.search:
            needle = query.search.lower()
            users = [
                u
                for u in users
                if any(
                    needle in field.lower()
                    for field in (u.first_name, u.last_name, u.email, u.username)
                )
            ]
        if query.role:
            users = [u for u in users if u.role is query.role]
        page = users[query.offset : query.offset + query.limit]
        return UserPage(users=page, total=len(users), page=query.page, limit=query.limit)


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


def make_user(
    *,
    user_id: str = "u-1",
    email: str = "a@b.com",
    role: Role = Role.WORKER,
    password: str = "secret1",
) -> User:
    return User(
        id=user_id,
        email=email,
        username=email.split("@")[0],
        password_hash=f"hashed:{password}",
        first_name="Ada",
        last_name="Byron",
        role=role,
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
    )


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_FILE", str(tmp_path / "logs" / "umms.log"))
    for name in ("ADMIN_EMAIL", "DATABASE_URL", "ALLOWED_ORIGINS", "ENABLE_HSTS", "APP_ENV"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        jwt_secret=TEST_SECRET,
        database=DatabaseConfig(url=f"sqlite:///{tmp_path / 'umms-test.db'}"),
    )


@pytest.fixture()
def database(config: AppConfig) -> Iterator[Database]:
    db = Database(config.database)
    yield db
    db.dispose()


@pytest.fixture()
def app(config: AppConfig, database: Database) -> Flask:
    return create_app(config, database=database)


@pytest.fixture()
def client(app: Flask) -> Iterator[FlaskClient]:
    with app.test_client() as test_client:
        yield test_client
