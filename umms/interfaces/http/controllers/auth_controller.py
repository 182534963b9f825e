# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, Response, jsonify, request
from pydantic import ValidationError

from umms.application.use_cases.users.login_user import LoginUserUseCase
from umms.application.use_cases.users.signup_user import SignupCommand, SignupUserUseCase
from umms.domain.users.entities import Identity
from umms.interfaces.http.dto.auth import (
    LoginRequestDTO,
    LoginResponseDTO,
    SessionClaimsDTO,
    SessionStatusDTO,
    SignupRequestDTO,
    SignupResponseDTO,
    UserDetailDTO,
    UserDTO,
)
from umms.interfaces.http.middleware.auth import AuthMiddleware
from umms.shared.errors.base import AppError, InternalError
from umms.shared.errors.validation import raise_validation_error
from umms.shared.logging import logger


def _get_client_ip() -> str | None:
    ip_address = request.headers.get("X-Forwarded-For", request.remote_addr)
    if ip_address and "," in ip_address:
        ip_address = ip_address.split(",")[0].strip()
    return ip_address


class AuthController:
    def __init__(
        self,
        *,
        signup_use_case: SignupUserUseCase,
        login_use_case: LoginUserUseCase,
        auth: AuthMiddleware,
    ) -> None:
        self._signup_use_case = signup_use_case
        self._login_use_case = login_use_case
        self._auth = auth

    def signup(self) -> tuple[Response, int]:
        try:
            dto = SignupRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        try:
            user = self._signup_use_case.execute(
                SignupCommand(
                    email=dto.email,
                    password=dto.password,
                    first_name=dto.first_name,
                    last_name=dto.last_name,
                    role=dto.role,
                )
            )
        except AppError:
            raise
        except Exception as exc:
            logger.exception("auth.signup: unexpected failure")
            raise InternalError("Failed to create user", details=str(exc)) from exc

        payload = SignupResponseDTO(user=UserDetailDTO.model_validate(user))
        logger.info(f"auth.signup: ok user_id={user.id} from {_get_client_ip()}")
        return jsonify(payload.model_dump(mode="json", by_alias=True)), 201

    def login(self) -> tuple[Response, int]:
        try:
            dto = LoginRequestDTO.model_validate(request.get_json(silent=True) or {})
        except ValidationError as exc:
            raise_validation_error(exc)

        try:
            result = self._login_use_case.execute(dto.email, dto.password)
        except AppError:
            logger.info(f"auth.login: failed from {_get_client_ip()}")
            raise
        except Exception as exc:
            logger.exception("auth.login: unexpected failure")
            raise InternalError("Failed to login", details=str(exc)) from exc

        payload = LoginResponseDTO(token=result.token, user=UserDTO.model_validate(result.user))
        logger.info(f"auth.login: ok user_id={result.user.id} from {_get_client_ip()}")
        return jsonify(payload.model_dump(mode="json", by_alias=True)), 200

    def session(self, identity: Identity | None) -> tuple[Response, int]:
        if identity is None:
            payload = SessionStatusDTO(authenticated=False)
        else:
            payload = SessionStatusDTO(
                authenticated=True, user=SessionClaimsDTO.model_validate(identity)
            )
        return jsonify(payload.model_dump(mode="json", by_alias=True, exclude_none=True)), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/signup", view_func=self.signup, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule(
            "/session", view_func=self._auth.optional_auth(self.session), methods=["GET"]
        )
        return bp

    def as_root_blueprint(self) -> Blueprint:
        bp = Blueprint("auth_root", __name__)
        bp.add_url_rule("/signup", view_func=self.signup, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        return bp
