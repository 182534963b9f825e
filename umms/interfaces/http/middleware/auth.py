# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Flask decorators around :mod:`umms.application.auth_gate`.

The decoded :class:`~umms.domain.users.entities.Identity` reaches the view
as the ``identity`` keyword argument. Stack the role decorators *under*
``authenticate_token`` so they see it::

    view = auth.authenticate_token(auth.require_admin(handler))
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from functools import wraps
from typing import Any

from flask import g, request

from umms.application.auth_gate import (
    ADMIN_ONLY,
    ADMIN_OR_SUPERVISOR,
    ADMIN_SUPERVISOR_OR_WORKER,
    AuthGate,
    RoleGuard,
)
from umms.domain.users.entities import Role
from umms.shared.errors import MissingCredentialError
from umms.shared.logging import logger

View = Callable[..., Any]


class AuthMiddleware:
    def __init__(self, gate: AuthGate) -> None:
        self._gate = gate

    def authenticate_token(self, view: View) -> View:
        @wraps(view)
        def inner(*args: Any, **kwargs: Any) -> Any:
            result = self._gate.authenticate(request.headers.get("Authorization"))
            identity = result.identity
            if result.failure is not None or identity is None:
                failure = result.failure or MissingCredentialError()
                logger.warning(f"Auth failed ({failure.code}) on {request.method} {request.path}")
                raise failure

            g.user_id = identity.user_id
            logger.debug(f"Auth OK: user={identity.user_id} {request.method} {request.path}")
            return view(*args, identity=identity, **kwargs)

        return inner

    def optional_auth(self, view: View) -> View:
        @wraps(view)
        def inner(*args: Any, **kwargs: Any) -> Any:
            identity = self._gate.authenticate_optional(request.headers.get("Authorization"))
            if identity is not None:
                g.user_id = identity.user_id
            return view(*args, identity=identity, **kwargs)

        return inner

    def require_role(self, allowed: RoleGuard | Iterable[Role | str]) -> Callable[[View], View]:
        guard = allowed if isinstance(allowed, RoleGuard) else RoleGuard(allowed)

        def decorator(view: View) -> View:
            @wraps(view)
            def inner(*args: Any, **kwargs: Any) -> Any:
                failure = guard.check(kwargs.get("identity"))
                if failure is not None:
                    logger.warning(
                        f"Access denied ({failure.code}) on {request.method} {request.path}, "
                        f"allowed={list(guard.roles)}"
                    )
                    raise failure
                return view(*args, **kwargs)

            return inner

        return decorator

    def require_admin(self, view: View) -> View:
        return self.require_role(ADMIN_ONLY)(view)

    def require_supervisor(self, view: View) -> View:
        return self.require_role(ADMIN_OR_SUPERVISOR)(view)

    def require_worker(self, view: View) -> View:
        return self.require_role(ADMIN_SUPERVISOR_OR_WORKER)(view)


__all__ = ["AuthMiddleware"]
