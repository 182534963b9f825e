# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from umms.shared.errors.base import AuthError, ConflictError, NotFoundError, ValidationError


class UserAlreadyExistsError(ConflictError):
    code = "user_already_exists"
    error = "User with this email already exists"


class EmailInUseError(ConflictError):
    code = "email_in_use"
    error = "Email already in use"


class UsernameTakenError(ConflictError):
    code = "username_taken"
    error = "Username already taken"


class UsernameInUseError(ConflictError):
    code = "username_in_use"
    error = "Username already in use"


class InvalidCredentialsError(AuthError):
    code = "invalid_credentials"


class UserNotFoundError(NotFoundError):
    code = "user_not_found"
    error = "User not found"


class SelfDeletionError(ValidationError):
    code = "self_deletion"
    error = "Cannot delete your own account"


class InvalidTokenError(Exception):
    """Session credential is malformed, tampered with or expired."""
