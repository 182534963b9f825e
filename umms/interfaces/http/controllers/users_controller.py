# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from umms.application.use_cases.users.manage_users import (
    CreateUserCommand,
    CreateUserUseCase,
    DeleteUserUseCase,
    GetUserUseCase,
    ListUsersUseCase,
    UpdateUserCommand,
    UpdateUserUseCase,
)
from umms.domain.users.entities import Identity, UserQuery
from umms.interfaces.http.dto.auth import UserDetailDTO
from umms.interfaces.http.dto.users import (
    CreateUserRequestDTO,
    PaginationDTO,
    UpdateUserRequestDTO,
    UserListDTO,
    UserListQueryDTO,
    UserMutationDTO,
)
from umms.interfaces.http.middleware.auth import AuthMiddleware
from umms.shared.errors.validation import raise_validation_error


class UsersController:
    """Admin-only management of user identities under ``/api/users``."""

    def __init__(
        self,
        *,
        list_users: ListUsersUseCase,
        get_user: GetUserUseCase,
        create_user: CreateUserUseCase,
        update_user: UpdateUserUseCase,
        delete_user: DeleteUserUseCase,
        auth: AuthMiddleware,
    ) -> None:
        self._list_users = list_users
        self._get_user = get_user
        self._create_user = create_user
        self._update_user = update_user
        self._delete_user = delete_user
        self._auth = auth

    def list_users(self, identity: Identity) -> tuple[Response, int]:
        try:
            params = UserListQueryDTO.model_validate(request.args.to_dict())
        except ValidationError as exc:
            raise_validation_error(exc, "Invalid query parameters")

        page = self._list_users.execute(
            UserQuery(
                search=params.search or None,
                role=params.role,
                page=params.page,
                limit=params.limit,
            )
        )
        payload = UserListDTO(
            users=[UserDetailDTO.model_validate(user) for user in page.users],
            pagination=PaginationDTO(
                total=page.total,
                page=page.page,
                limit=page.limit,
                total_pages=page.total_pages,
            ),
        )
        return jsonify(payload.model_dump(mode="json", by_alias=True)), 200

    def get_user(self, user_id: str, identity: Identity) -> tuple[Response, int]:
        user = self._get_user.execute(user_id)
        return jsonify(UserDetailDTO.model_validate(user).model_dump(mode="json", by_alias=True)), 200

    def create_user(self, identity: Identity) -> tuple[Response, int]:
        try:
            dto = CreateUserRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user = self._create_user.execute(
            CreateUserCommand(
                email=dto.email,
                password=dto.password,
                first_name=dto.first_name,
                last_name=dto.last_name,
                role=dto.role,
                username=dto.username,
            ),
            actor_id=identity.user_id,
        )
        payload = UserMutationDTO(
            message="User created successfully", user=UserDetailDTO.model_validate(user)
        )
        return jsonify(payload.model_dump(mode="json", by_alias=True)), 201

    def update_user(self, user_id: str, identity: Identity) -> tuple[Response, int]:
        try:
            dto = UpdateUserRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        user = self._update_user.execute(
            user_id,
            UpdateUserCommand(
                email=dto.email,
                first_name=dto.first_name,
                last_name=dto.last_name,
                role=dto.role,
                username=dto.username,
                password=dto.password,
            ),
            actor_id=identity.user_id,
        )
        payload = UserMutationDTO(
            message="User updated successfully", user=UserDetailDTO.model_validate(user)
        )
        return jsonify(payload.model_dump(mode="json", by_alias=True)), 200

    def delete_user(self, user_id: str, identity: Identity) -> tuple[Response, int]:
        self._delete_user.execute(user_id, actor_id=identity.user_id)
        payload = UserMutationDTO(message="User deleted successfully")
        return jsonify(payload.model_dump(mode="json", exclude_none=True)), 200

    def _admin(self, view):
        return self._auth.authenticate_token(self._auth.require_admin(view))

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("users", __name__, url_prefix="/api/users")
        bp.add_url_rule("", view_func=self._admin(self.list_users), methods=["GET"])
        bp.add_url_rule("", view_func=self._admin(self.create_user), methods=["POST"])
        bp.add_url_rule(
            "/<user_id>", view_func=self._admin(self.get_user), methods=["GET"]
        )
        bp.add_url_rule(
            "/<user_id>", view_func=self._admin(self.update_user), methods=["PUT"]
        )
        bp.add_url_rule(
            "/<user_id>", view_func=self._admin(self.delete_user), methods=["DELETE"]
        )
        return bp
