# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    ADMIN = "Admin"
    SUPERVISOR = "Supervisor"
    WORKER = "Worker"
    DISPATCH = "Dispatch"
    SALES = "Sales"

    def __str__(self) -> str:
        return self.value


DEFAULT_ROLE = Role.WORKER


@dataclass(slots=True, frozen=True)
class User:

    id: str
    email: str
    username: str
    password_hash: str
    first_name: str
    last_name: str
    role: Role
    created_at: datetime
    updated_at: datetime | None = None


@dataclass(slots=True, frozen=True)
class Identity:
    """Decoded session credential, handed to request handlers."""

    user_id: str
    email: str
    role: str
    issued_at: datetime
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class UserQuery:

    search: str | None = None
    role: Role | None = None
    page: int = 1
    limit: int = 50

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(slots=True, frozen=True)
class UserPage:

    users: list[User]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return -(-self.total // self.limit) if self.limit else 0
