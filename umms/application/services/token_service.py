# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Session credentials as HS256-signed JWTs."""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import jwt

from umms.domain.users.entities import Identity, User
from umms.domain.users.exceptions import InvalidTokenError
from umms.domain.users.repositories import TokenService

JWT_ALGORITHM = "HS256"
TOKEN_TTL = timedelta(hours=1)

CLAIM_USER_ID = "userId"
CLAIM_EMAIL = "email"
CLAIM_ROLE = "role"
_REQUIRED_CLAIMS = (CLAIM_USER_ID, CLAIM_EMAIL, CLAIM_ROLE)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class JwtTokenService(TokenService):
    """Issues and verifies session credentials.

    The payload is signed, not encrypted: ``userId``, ``email`` and ``role``
    are readable by whoever holds the token. There is no revocation; a token
    stays valid until ``exp`` or until the signing secret changes.
    """

    def __init__(
        self,
        secret: str,
        *,
        ttl: timedelta = TOKEN_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._secret = secret
        self._ttl = ttl
        self._clock = clock

    def issue(self, user: User) -> str:
        issued_at = self._clock()
        payload = {
            CLAIM_USER_ID: user.id,
            CLAIM_EMAIL: user.email,
            CLAIM_ROLE: user.role.value,
            "iat": int(issued_at.timestamp()),
            "exp": int((issued_at + self._ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def verify(self, token: str) -> Identity:
        """Decode ``token``.

        Raises :class:`InvalidTokenError` for bad signatures, malformed input,
        expiry or missing claims. Anything else (e.g. a broken key setup)
        propagates unchanged so callers can tell the two apart.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"require": ["exp", "iat", *_REQUIRED_CLAIMS]},
            )
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError(str(exc)) from exc

        if not all(isinstance(payload.get(claim), str) for claim in _REQUIRED_CLAIMS):
            raise InvalidTokenError("Session claims must be strings")

        return Identity(
            user_id=payload[CLAIM_USER_ID],
            email=payload[CLAIM_EMAIL],
            role=payload[CLAIM_ROLE],
            issued_at=datetime.fromtimestamp(payload["iat"], UTC),
            expires_at=datetime.fromtimestamp(payload["exp"], UTC),
        )
