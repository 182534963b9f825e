# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException

from umms.shared.logging import logger

from .base import AppError


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    response = jsonify(error.to_dict())
    return response, error.status


def register_error_handler(
    app: Flask,
    *,
    debug_mode: bool = False,
    default_status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR,
) -> None:
    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR:
            logger.error(
                f"Application error {exc.code} on {request.method} {request.path}: {exc.details}"
            )
        else:
            logger.info(
                f"Handled application error {exc.code} on {request.method} {request.path}"
            )
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        response = jsonify({"error": exc.name, "message": exc.description})
        return response, exc.code

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        forwarded = request.headers.get("X-Forwarded-For")
        ip_address = (
            forwarded.split(",")[0].strip() if forwarded else (request.remote_addr or "unknown")
        )
        user_id = getattr(g, "user_id", None)

        if debug_mode:
            logger.exception(
                f"Unhandled exception: {request.method} {request.path} "
                f"from {ip_address}, user={user_id}, "
                f"query={dict(request.args)}, body_size={len(request.data)}"
            )
        else:
            logger.error(f"Error: {type(exc).__name__} on {request.method} {request.path}")

        response = jsonify({"error": "internal_error"})
        return response, default_status
