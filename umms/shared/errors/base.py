# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, cast


@dataclass(slots=True)
class AppError(Exception):
    code: str
    status: HTTPStatus
    error: str | None = None
    message: str | None = None
    details: str | None = None
    context: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        Exception.__init__(self, self.error or self.code)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.error or self.code}
        if self.message:
            payload["message"] = self.message
        if self.details:
            payload["details"] = self.details
        if self.context:
            payload["context"] = dict(self.context)
        return payload


class DomainError(AppError):
    """Expected, client-caused failure. Subclasses declare ``code``/``status``/``error``."""

    # Shadow the dataclass slots so getattr() on the class yields plain defaults.
    code = "domain_error"
    status = HTTPStatus.BAD_REQUEST
    error = None
    message = None

    def __init__(
        self,
        error: str | None = None,
        *,
        code: str | None = None,
        status: HTTPStatus | None = None,
        message: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        resolved_code = code or cast(str, getattr(type(self), "code", "domain_error"))
        resolved_status = status or cast(
            HTTPStatus, getattr(type(self), "status", HTTPStatus.BAD_REQUEST)
        )
        resolved_error = error or cast("str | None", getattr(type(self), "error", None))
        resolved_message = message or cast("str | None", getattr(type(self), "message", None))
        super().__init__(
            code=resolved_code,
            status=resolved_status,
            error=resolved_error,
            message=resolved_message,
            context=context,
        )


class ValidationError(DomainError):
    code = "validation_error"
    status = HTTPStatus.BAD_REQUEST


class ConflictError(DomainError):
    code = "conflict"
    status = HTTPStatus.BAD_REQUEST


class NotFoundError(DomainError):
    code = "not_found"
    status = HTTPStatus.NOT_FOUND


class AuthError(DomainError):
    code = "invalid_credentials"
    status = HTTPStatus.BAD_REQUEST
    error = "Invalid credentials"


class MissingCredentialError(DomainError):
    code = "missing_credential"
    status = HTTPStatus.UNAUTHORIZED
    error = "Access token required"
    message = "Please provide a valid authentication token"


class InvalidCredentialError(DomainError):
    code = "invalid_credential"
    status = HTTPStatus.FORBIDDEN
    error = "Invalid token"
    message = "The provided token is invalid or expired"


class UnauthenticatedError(DomainError):
    code = "unauthenticated"
    status = HTTPStatus.UNAUTHORIZED
    error = "Authentication required"
    message = "This endpoint requires authentication"


class ForbiddenError(DomainError):
    code = "forbidden"
    status = HTTPStatus.FORBIDDEN
    error = "Insufficient permissions"


class InfrastructureError(AppError):
    def __init__(
        self,
        error: str = "internal_error",
        *,
        code: str = "internal_error",
        status: HTTPStatus | None = None,
        message: str | None = None,
        details: str | None = None,
    ) -> None:
        resolved_status = status or HTTPStatus.INTERNAL_SERVER_ERROR
        super().__init__(
            code=code,
            status=resolved_status,
            error=error,
            message=message,
            details=details,
        )


class InternalError(InfrastructureError):
    pass
