# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import re

from umms.shared.errors.base import ValidationError

from .entities import DEFAULT_ROLE, Role

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6

MISSING_SIGNUP_FIELDS = "Email, password, firstName, and lastName are required"
MISSING_LOGIN_FIELDS = "Email & password required"
INVALID_EMAIL = "Invalid email format"
WEAK_PASSWORD = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
INVALID_ROLE = "Role must be one of: " + ", ".join(role.value for role in Role)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def username_from_email(email: str) -> str:
    return email.split("@", 1)[0]


def require_fields(message: str, *values: str | None) -> tuple[str, ...]:
    """Return the values unchanged once every one of them is non-empty."""
    present = tuple(value for value in values if value)
    if len(present) != len(values):
        raise ValidationError(message, code="missing_fields")
    return present


def validate_email(email: str) -> str:
    normalized = normalize_email(email)
    if not EMAIL_PATTERN.match(normalized):
        raise ValidationError(INVALID_EMAIL, code="invalid_email")
    return normalized


def is_strong_password(password: str) -> bool:
    return len(password) >= MIN_PASSWORD_LENGTH


def validate_password(password: str) -> str:
    if not is_strong_password(password):
        raise ValidationError(WEAK_PASSWORD, code="weak_password")
    return password


def parse_role(value: str | Role | None) -> Role:
    if not value:
        return DEFAULT_ROLE
    try:
        return Role(value)
    except ValueError:
        raise ValidationError(INVALID_ROLE, code="invalid_role") from None
