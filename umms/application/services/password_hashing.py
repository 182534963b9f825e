"""Password hashing strategies."""

from __future__ import annotations

import bcrypt

from umms.domain.users.repositories import PasswordHasher

BCRYPT_ROUNDS = 10
# bcrypt only consumes the first 72 bytes of the secret.
_MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_MAX_PASSWORD_BYTES]


class BcryptPasswordHasher(PasswordHasher):
    def __init__(self, rounds: int = BCRYPT_ROUNDS) -> None:
        self._rounds = rounds

    def hash(self, password: str) -> str:
        if not password:
            raise ValueError("Cannot hash an empty password")
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self._rounds)).decode("ascii")

    def verify(self, password: str, hashed: str) -> bool:
        if not password or not hashed:
            return False
        try:
            return bcrypt.checkpw(_encode(password), hashed.encode("ascii"))
        except ValueError:
            # Stored value is not a bcrypt hash.
            return False
