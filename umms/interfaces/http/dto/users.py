# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from umms.domain.users.entities import Role

from .auth import UserDetailDTO


class UserListQueryDTO(BaseModel):
    search: str | None = None
    role: Role | None = None
    page: int = Field(1, ge=1)
    limit: int = Field(50, ge=1, le=200)

    @field_validator("search", "role", mode="before")
    @classmethod
    def _blank_filter_is_unset(cls, value: object) -> object:
        # Filter forms submit empty params for "any".
        if isinstance(value, str) and not value.strip():
            return None
        return value


class CreateUserRequestDTO(BaseModel):
    email: str | None = None
    password: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: str | None = None
    username: str | None = None

    model_config = ConfigDict(
        alias_generator=to_camel, validate_by_name=True, validate_by_alias=True, extra="ignore"
    )


class UpdateUserRequestDTO(CreateUserRequestDTO):
    pass


class PaginationDTO(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int

    model_config = ConfigDict(alias_generator=to_camel, serialize_by_alias=True, validate_by_name=True)


class UserListDTO(BaseModel):
    users: list[UserDetailDTO]
    pagination: PaginationDTO


class UserMutationDTO(BaseModel):
    message: str
    user: UserDetailDTO | None = None
