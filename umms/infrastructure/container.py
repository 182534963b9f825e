# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from functools import cached_property

from umms.application.auth_gate import AuthGate
from umms.application.services.password_hashing import BcryptPasswordHasher
from umms.application.services.token_service import JwtTokenService
from umms.application.use_cases.users.login_user import LoginUserUseCase
from umms.application.use_cases.users.manage_users import (
    CreateUserUseCase,
    DeleteUserUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    UpdateUserUseCase,
)
from umms.application.use_cases.users.signup_user import SignupUserUseCase
from umms.infrastructure.db import Database
from umms.infrastructure.repositories.sqlalchemy_user_repository import \
    SqlAlchemyUserRepository
from umms.interfaces.http.controllers.auth_controller import AuthController
from umms.interfaces.http.controllers.misc_controller import MiscController
from umms.interfaces.http.controllers.users_controller import UsersController
from umms.interfaces.http.middleware.auth import AuthMiddleware
from umms.shared.config import AppConfig


class Container:
    def __init__(self, config: AppConfig, database: Database | None = None) -> None:
        self.config = config
        self._database = database

    @cached_property
    def database(self) -> Database:
        return self._database or Database(self.config.database)

    @cached_property
    def password_hasher(self) -> BcryptPasswordHasher:
        return BcryptPasswordHasher()

    @cached_property
    def token_service(self) -> JwtTokenService:
        return JwtTokenService(self.config.jwt_secret)

    @cached_property
    def user_repository(self) -> SqlAlchemyUserRepository:
        return SqlAlchemyUserRepository(self.database)

    @cached_property
    def auth_gate(self) -> AuthGate:
        return AuthGate(self.token_service)

    @cached_property
    def auth_middleware(self) -> AuthMiddleware:
        return AuthMiddleware(self.auth_gate)

    @cached_property
    def signup_user_use_case(self) -> SignupUserUseCase:
        return SignupUserUseCase(users=self.user_repository, password_hasher=self.password_hasher)

    @cached_property
    def login_user_use_case(self) -> LoginUserUseCase:
        return LoginUserUseCase(
            users=self.user_repository,
            tokens=self.token_service,
            password_hasher=self.password_hasher,
        )

    @cached_property
    def auth_controller(self) -> AuthController:
        return AuthController(
            signup_use_case=self.signup_user_use_case,
            login_use_case=self.login_user_use_case,
            auth=self.auth_middleware,
        )

    # User administration

    @cached_property
    def users_controller(self) -> UsersController:
        return UsersController(
            list_users=ListUsersUseCase(users=self.user_repository),
            get_user=GetUserUseCase(users=self.user_repository),
            create_user=CreateUserUseCase(
                users=self.user_repository, password_hasher=self.password_hasher
            ),
            update_user=UpdateUserUseCase(
                users=self.user_repository, password_hasher=self.password_hasher
            ),
            delete_user=DeleteUserUseCase(users=self.user_repository),
            auth=self.auth_middleware,
        )

    @cached_property
    def misc_controller(self) -> MiscController:
        return MiscController(database=self.database)

    def close(self) -> None:
        # A database handed in by the caller is theirs to dispose.
        if self._database is None and "database" in self.__dict__:
            self.database.dispose()
