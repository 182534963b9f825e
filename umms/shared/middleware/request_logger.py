# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import secrets
import time
from collections.abc import Mapping

from flask import Flask, Response, g, request

from umms.shared.logging import clear_correlation_id, logger, set_correlation_id

REQUEST_ID_HEADER = "X-Request-ID"

_HASHED_HEADERS = frozenset({"authorization", "cookie", "x-api-key", "x-auth-token"})
_REDACTED_PARAM_HINTS = ("password", "token", "secret", "key", "auth")


def _client_ip() -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.remote_addr or "unknown"


def _fingerprint(value: str) -> str:
    return f"<sha256:{hashlib.sha256(value.encode()).hexdigest()[:8]}>"


def safe_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Replace credential-bearing header values with a short digest."""
    return {
        name: _fingerprint(value) if name.lower() in _HASHED_HEADERS else value
        for name, value in headers.items()
    }


def safe_query(params: Mapping[str, str]) -> dict[str, str]:
    return {
        name: "<redacted>" if any(hint in name.lower() for hint in _REDACTED_PARAM_HINTS) else value
        for name, value in params.items()
    }


def configure_request_logging(app: Flask, *, debug_mode: bool = False) -> None:
    """Tag each request with a correlation id and log its start and outcome."""

    @app.before_request
    def _open_request() -> None:
        request_id = request.headers.get(REQUEST_ID_HEADER) or secrets.token_hex(6)
        set_correlation_id(request_id)
        g.request_id = request_id
        g.request_started = time.perf_counter()

        if debug_mode:
            logger.debug(
                f"--> {request.method} {request.path} from {_client_ip()} "
                f"query={safe_query(request.args.to_dict())} "
                f"headers={safe_headers(dict(request.headers))} "
                f"body_size={request.content_length or 0}"
            )
        else:
            logger.info(f"--> {request.method} {request.path} from {_client_ip()}")

    @app.after_request
    def _close_request(response: Response) -> Response:
        elapsed_ms = (time.perf_counter() - g.get("request_started", time.perf_counter())) * 1000
        user = g.get("user_id") or "anonymous"
        message = (
            f"<-- {request.method} {request.path} {response.status_code} "
            f"in {elapsed_ms:.1f} ms user={user}"
        )
        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code in (401, 403):
            logger.warning(message)
        else:
            logger.info(message)

        response.headers.setdefault(REQUEST_ID_HEADER, g.get("request_id", ""))
        return response

    @app.teardown_request
    def _finish_request(exc: BaseException | None) -> None:
        if exc is not None:
            logger.error(f"Request aborted: {type(exc).__name__} on {request.method} {request.path}")
        clear_correlation_id()


__all__ = ["REQUEST_ID_HEADER", "configure_request_logging", "safe_headers", "safe_query"]
