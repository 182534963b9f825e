# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Bearer-credential verification and role allow-lists.

Nothing here raises for an expected outcome: the gate hands back a
:class:`GateResult` and the guard hands back the error to report (or
``None``). The HTTP layer decides what to do with them.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from umms.domain.users.entities import Identity, Role
from umms.domain.users.exceptions import InvalidTokenError
from umms.domain.users.repositories import TokenService
from umms.shared.errors.base import (
    AppError,
    ForbiddenError,
    InternalError,
    InvalidCredentialError,
    MissingCredentialError,
    UnauthenticatedError,
)
from umms.shared.logging import logger


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the second whitespace-delimited segment of the header, if any."""
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) < 2:
        return None
    return parts[1]


@dataclass(slots=True, frozen=True)
class GateResult:
    identity: Identity | None = None
    failure: AppError | None = None

    @property
    def ok(self) -> bool:
        return self.identity is not None and self.failure is None


class AuthGate:
    def __init__(self, tokens: TokenService) -> None:
        self._tokens = tokens

    def authenticate(self, authorization: str | None) -> GateResult:
        token = extract_bearer_token(authorization)
        if not token:
            return GateResult(failure=MissingCredentialError())

        try:
            identity = self._tokens.verify(token)
        except InvalidTokenError as exc:
            logger.info(f"auth.gate: rejected credential ({exc})")
            return GateResult(failure=InvalidCredentialError())
        except Exception as exc:
            logger.exception("auth.gate: credential verification failed")
            return GateResult(
                failure=InternalError(
                    "Token verification failed",
                    code="token_verification_failed",
                    message="Failed to verify authentication token",
                    details=type(exc).__name__,
                )
            )
        return GateResult(identity=identity)

    def authenticate_optional(self, authorization: str | None) -> Identity | None:
        token = extract_bearer_token(authorization)
        if not token:
            return None
        try:
            return self._tokens.verify(token)
        except Exception as exc:
            logger.debug(f"auth.gate: ignoring unusable optional credential ({type(exc).__name__})")
            return None


class RoleGuard:
    """Admits identities whose role is one of ``allowed``. No implied hierarchy."""

    def __init__(self, allowed: Iterable[Role | str]) -> None:
        roles: list[str] = []
        for role in allowed:
            value = Role(role).value
            if value not in roles:
                roles.append(value)
        if not roles:
            raise ValueError("RoleGuard requires at least one role")
        self._roles = tuple(roles)

    @property
    def roles(self) -> tuple[str, ...]:
        return self._roles

    def check(self, identity: Identity | None) -> AppError | None:
        if identity is None:
            return UnauthenticatedError()
        if identity.role not in self._roles:
            return ForbiddenError(
                message=f"This endpoint requires one of these roles: {', '.join(self._roles)}"
            )
        return None

    def __repr__(self) -> str:
        return f"RoleGuard({list(self._roles)!r})"


ADMIN_ONLY = RoleGuard([Role.ADMIN])
ADMIN_OR_SUPERVISOR = RoleGuard([Role.ADMIN, Role.SUPERVISOR])
ADMIN_SUPERVISOR_OR_WORKER = RoleGuard([Role.ADMIN, Role.SUPERVISOR, Role.WORKER])
