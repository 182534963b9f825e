# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass

from umms.domain.users.entities import User
from umms.domain.users.exceptions import InvalidCredentialsError
from umms.domain.users.repositories import PasswordHasher, TokenService, UserRepository
from umms.domain.users.validation import MISSING_LOGIN_FIELDS, normalize_email, require_fields
from umms.shared.logging import logger


@dataclass(slots=True, frozen=True)
class LoginResult:
    token: str
    user: User


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        tokens: TokenService,
        password_hasher: PasswordHasher,
    ) -> None:
        self._users = users
        self._tokens = tokens
        self._password_hasher = password_hasher

    def execute(self, email: str | None, password: str | None) -> LoginResult:
        email, password = require_fields(MISSING_LOGIN_FIELDS, email, password)

        user = self._users.find_by_email(normalize_email(email))

        # Unknown account and wrong password must look the same to the caller.
        if user is None or not self._password_hasher.verify(password, user.password_hash):
            logger.info("users.login: rejected credentials")
            raise InvalidCredentialsError()

        token = self._tokens.issue(user)
        logger.info(f"users.login: ok user_id={user.id}")
        return LoginResult(token=token, user=user)
