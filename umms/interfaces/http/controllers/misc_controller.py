# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from flask import Blueprint, jsonify

from umms.infrastructure.db import Database


class MiscController:
    def __init__(self, *, database: Database) -> None:
        self._database = database

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("misc", __name__)
        bp.add_url_rule("/health", view_func=self.health, methods=["GET"])
        return bp

    def health(self):
        status: dict[str, object] = {"status": "OK", "message": "UMMS Backend is running"}
        try:
            self._database.ping()
            status["database"] = "ok"
        except Exception as exc:  # pragma: no cover
            status["status"] = "DEGRADED"
            status["database"] = f"error: {type(exc).__name__}"
        return jsonify(status)
