from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from umms.domain.users.entities import Role

_REQUEST_CONFIG = ConfigDict(
    alias_generator=to_camel,
    validate_by_name=True,
    validate_by_alias=True,
    extra="ignore",
)
_RESPONSE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    serialize_by_alias=True,
    validate_by_name=True,
    from_attributes=True,
)


class SignupRequestDTO(BaseModel):
    # Presence and format are checked by the use case so that the error
    # messages stay the same for every client.
    email: str | None = None
    password: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    role: str | None = None

    model_config = _REQUEST_CONFIG


class LoginRequestDTO(BaseModel):
    email: str | None = None
    password: str | None = None

    model_config = _REQUEST_CONFIG


class UserDTO(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    role: Role
    username: str

    model_config = _RESPONSE_CONFIG


class UserDetailDTO(UserDTO):
    created_at: datetime
    updated_at: datetime | None = None


class SignupResponseDTO(BaseModel):
    message: str = "User created successfully"
    user: UserDetailDTO

    model_config = _RESPONSE_CONFIG


class LoginResponseDTO(BaseModel):
    message: str = "Login successful"
    token: str
    user: UserDTO

    model_config = _RESPONSE_CONFIG


class SessionClaimsDTO(BaseModel):
    user_id: str
    email: str
    role: str
    issued_at: datetime
    expires_at: datetime

    model_config = _RESPONSE_CONFIG


class SessionStatusDTO(BaseModel):
    authenticated: bool
    user: SessionClaimsDTO | None = None

    model_config = _RESPONSE_CONFIG
