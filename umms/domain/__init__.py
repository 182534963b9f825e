# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .users.entities import DEFAULT_ROLE, Identity, Role, User, UserPage, UserQuery
from .users.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    UserAlreadyExistsError,
    UserNotFoundError,
)

__all__ = [
    "DEFAULT_ROLE",
    "Identity",
    "Role",
    "User",
    "UserPage",
    "UserQuery",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "UserAlreadyExistsError",
    "UserNotFoundError",
]
