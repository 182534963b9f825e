# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime

from umms.domain.users.entities import User
from umms.domain.users.exceptions import UserAlreadyExistsError
from umms.domain.users.repositories import PasswordHasher, UserRepository
from umms.domain.users.validation import (
    MISSING_SIGNUP_FIELDS,
    parse_role,
    require_fields,
    username_from_email,
    validate_email,
    validate_password,
)
from umms.shared.logging import logger


@dataclass(slots=True, frozen=True)
class SignupCommand:
    email: str | None
    password: str | None
    first_name: str | None
    last_name: str | None
    role: str | None = None


class SignupUserUseCase:
    def __init__(self, *, users: UserRepository, password_hasher: PasswordHasher) -> None:
        self._users = users
        self._password_hasher = password_hasher

    def execute(self, command: SignupCommand) -> User:
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

        # Friendly pre-check; the unique index on users.email is what actually
        # guarantees uniqueness under concurrent signups.
        if self._users.find_by_email(email):
            raise UserAlreadyExistsError()

        now = datetime.now(UTC)
        user = User(
            id=str(uuid.uuid4()),
            email=email,
            username=username_from_email(email),
            password_hash=self._password_hasher.hash(password),
            first_name=first_name,
            last_name=last_name,
            role=role,
            created_at=now,
            updated_at=now,
        )
        persisted = self._users.add(user)
        logger.info(f"users.signup: created user_id={persisted.id} role={persisted.role}")
        return persisted
