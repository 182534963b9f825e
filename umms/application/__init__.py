# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .auth_gate import (
    ADMIN_ONLY,
    ADMIN_OR_SUPERVISOR,
    ADMIN_SUPERVISOR_OR_WORKER,
    AuthGate,
    GateResult,
    RoleGuard,
    extract_bearer_token,
)
from .use_cases.users.login_user import LoginResult, LoginUserUseCase
from .use_cases.users.signup_user import SignupCommand, SignupUserUseCase

__all__ = [
    "ADMIN_ONLY",
    "ADMIN_OR_SUPERVISOR",
    "ADMIN_SUPERVISOR_OR_WORKER",
    "AuthGate",
    "GateResult",
    "RoleGuard",
    "extract_bearer_token",
    "LoginResult",
    "LoginUserUseCase",
    "SignupCommand",
    "SignupUserUseCase",
]
