# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import UTC, datetime

from umms.domain.users.entities import Role, User
from umms.domain.users.repositories import PasswordHasher, UserRepository
from umms.domain.users.validation import (
    normalize_email,
    username_from_email,
    validate_email,
    validate_password,
)
from umms.shared.logging import logger


class AdminSetupError(Exception):
    pass


def promote_admin(users: UserRepository, email: str | None) -> User | None:
    """Grant the Admin role to an existing account named by ``ADMIN_EMAIL``."""
    if not email:
        logger.info("admin_setup: No ADMIN_EMAIL configured, skipping admin setup")
        return None

    user = users.find_by_email(normalize_email(email))
    if user is None:
        raise AdminSetupError(
            f"ADMIN_EMAIL '{email}' not found in database. "
            "Create this user first or update ADMIN_EMAIL."
        )

    if user.role is Role.ADMIN:
        logger.info(f"admin_setup: user {user.id} already has the Admin role")
        return user

    promoted = users.update(replace(user, role=Role.ADMIN, updated_at=datetime.now(UTC)))
    logger.info(f"admin_setup: granted Admin role to user {user.id}")
    return promoted


def create_admin(
    users: UserRepository,
    hasher: PasswordHasher,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
) -> User:
    """Create an Admin account, or promote and re-key an existing one."""
    normalized = validate_email(email)
    validate_password(password)
    now = datetime.now(UTC)

    existing = users.find_by_email(normalized)
    if existing is not None:
        updated = replace(
            existing,
            role=Role.ADMIN,
            password_hash=hasher.hash(password),
            updated_at=now,
        )
        logger.info(f"admin_setup: promoted existing user {existing.id} to Admin")
        return users.update(updated)

    user = users.add(
        User(
            id=str(uuid.uuid4()),
            email=normalized,
            username=username_from_email(normalized),
            password_hash=hasher.hash(password),
            first_name=first_name,
            last_name=last_name,
            role=Role.ADMIN,
            created_at=now,
            updated_at=now,
        )
    )
    logger.info(f"admin_setup: created Admin user {user.id}")
    return user


__all__ = ["AdminSetupError", "create_admin", "promote_admin"]
