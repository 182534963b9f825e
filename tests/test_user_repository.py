from __future__ import annotations

from dataclasses import replace

import pytest
from conftest import make_user

from umms.domain.users.exceptions import EmailInUseError, UserAlreadyExistsError
from umms.infrastructure.db import Database
from umms.infrastructure.repositories.sqlalchemy_user_repository import SqlAlchemyUserRepository


@pytest.fixture()
def repo(database: Database) -> SqlAlchemyUserRepository:
    database.create_all()
    return SqlAlchemyUserRepository(database)


def test_unique_index_rejects_duplicate_email_on_insert(repo: SqlAlchemyUserRepository) -> None:
    repo.add(make_user(user_id="u-1", email="a@b.com"))

    with pytest.raises(UserAlreadyExistsError) as exc_info:
        repo.add(make_user(user_id="u-2", email="a@b.com"))

    assert exc_info.value.to_dict() == {"error": "User with this email already exists"}
    assert repo.find_by_id("u-2") is None


def test_unique_index_rejects_email_taken_on_update(repo: SqlAlchemyUserRepository) -> None:
    repo.add(make_user(user_id="u-1", email="a@b.com"))
    second = repo.add(make_user(user_id="u-2", email="c@d.com"))

    with pytest.raises(EmailInUseError) as exc_info:
        repo.update(replace(second, email="a@b.com"))

    assert exc_info.value.to_dict() == {"error": "Email already in use"}
    stored = repo.find_by_id("u-2")
    assert stored is not None
    assert stored.email == "c@d.com"


def test_update_persists_changes(repo: SqlAlchemyUserRepository) -> None:
    user = repo.add(make_user(user_id="u-1", email="a@b.com"))

    repo.update(replace(user, first_name="Grace", email="grace@b.com"))

    stored = repo.find_by_email("GRACE@b.com")
    assert stored is not None
    assert stored.first_name == "Grace"
    assert stored.created_at.tzinfo is not None
