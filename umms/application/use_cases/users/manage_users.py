# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Admin-side management of user identities."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from datetime import UTC, datetime

from umms.domain.users.entities import User, UserPage, UserQuery
from umms.domain.users.exceptions import (
    EmailInUseError,
    SelfDeletionError,
    UserAlreadyExistsError,
    UsernameInUseError,
    UsernameTakenError,
    UserNotFoundError,
)
from umms.domain.users.repositories import PasswordHasher, UserRepository
from umms.domain.users.validation import (
    MISSING_SIGNUP_FIELDS,
    is_strong_password,
    parse_role,
    require_fields,
    username_from_email,
    validate_email,
    validate_password,
)
from umms.shared.logging import logger


class ListUsersUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, query: UserQuery) -> UserPage:
        return self._users.search(query)


class GetUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str) -> User:
        user = self._users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError()
        return user


@dataclass(slots=True, frozen=True)
class CreateUserCommand:
    email: str | None
    password: str | None
    first_name: str | None
    last_name: str | None
    role: str | None = None
    username: str | None = None


class CreateUserUseCase:
    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, command: CreateUserCommand, *, actor_id: str) -> User:
        raw_email, raw_password, first_name, last_name = require_fields(
            MISSING_SIGNUP_FIELDS,
            command.email,
            command.password,
            command.first_name,
            command.last_name,
        )
        email = validate_email(raw_email)
        password = validate_password(raw_password)
        role = parse_role(command.role)

        if self._users.find_by_email(email):
            raise UserAlreadyExistsError()

        username = (command.username or "").strip() or username_from_email(email)
        if self._users.find_by_username(username):
            raise UsernameTakenError()

        now = datetime.now(UTC)
        user = self._users.add(
            User(
                id=str(uuid.uuid4()),
                email=email,
                username=username,
                password_hash=self._password_hasher.hash(password),
                first_name=first_name,
                last_name=last_name,
                role=role,
                created_at=now,
                updated_at=now,
            )
        )
        logger.info(f"users.create: user_id={user.id} role={user.role} by={actor_id}")
        return user


@dataclass(slots=True, frozen=True)
class UpdateUserCommand:
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: str | None = None
    username: str | None = None
    password: str | None = None


class UpdateUserUseCase:
    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, user_id: str, command: UpdateUserCommand, *, actor_id: str) -> User:
        existing = self._users.find_by_id(user_id)
        if existing is None:
            raise UserNotFoundError()

        changes: dict[str, object] = {}
        if command.first_name:
            changes["first_name"] = command.first_name
        if command.last_name:
            changes["last_name"] = command.last_name
        if command.role:
            changes["role"] = parse_role(command.role)

        if command.email:
            email = validate_email(command.email)
            if email != existing.email:
                if self._users.find_by_email(email):
                    raise EmailInUseError()
                changes["email"] = email

        username = (command.username or "").strip()
        if username and username != existing.username:
            if self._users.find_by_username(username):
                raise UsernameInUseError()
            changes["username"] = username

        # Short passwords are ignored here rather than rejected.
        if command.password and is_strong_password(command.password):
            changes["password_hash"] = self._password_hasher.hash(command.password)

        updated = replace(existing, updated_at=datetime.now(UTC), **changes)  # type: ignore[arg-type]
        persisted = self._users.update(updated)
        logger.info(
            f"users.update: user_id={user_id} fields={sorted(changes)} by={actor_id}"
        )
        return persisted


class DeleteUserUseCase:
    def __init__(self, *, users: UserRepository) -> None:
        self._users = users

    def execute(self, user_id: str, *, actor_id: str) -> None:
        if self._users.find_by_id(user_id) is None:
            raise UserNotFoundError()
        if user_id == actor_id:
            raise SelfDeletionError()
        self._users.delete(user_id)
        logger.info(f"users.delete: user_id={user_id} by={actor_id}")


__all__ = [
    "CreateUserCommand",
    "CreateUserUseCase",
    "DeleteUserUseCase",
    "GetUserUseCase",
    "ListUsersUseCase",
    "UpdateUserCommand",
    "UpdateUserUseCase",
]
