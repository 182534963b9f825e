# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import atexit

from flask import Flask
from flask_cors import CORS

from umms.infrastructure.admin_setup import AdminSetupError, promote_admin
from umms.infrastructure.container import Container
from umms.infrastructure.db import Database
from umms.shared.config import AppConfig, load_config
from umms.shared.logging import logger, setup_logging
from umms.shared.middleware.error_handler import configure_error_handling
from umms.shared.middleware.request_logger import configure_request_logging


def _add_security_headers(app: Flask, *, enable_hsts: bool) -> None:
    @app.after_request
    def _security_headers(resp):
        resp.headers.setdefault("X-Frame-Options", "DENY")
        resp.headers.setdefault("Referrer-Policy", "no-referrer")
        resp.headers.setdefault("X-Content-Type-Options", "nosniff")
        resp.headers.setdefault("Cross-Origin-Opener-Policy", "same-origin")
        resp.headers.setdefault("X-Permitted-Cross-Domain-Policies", "none")

        if enable_hsts:
            resp.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return resp


def create_app(config: AppConfig | None = None, *, database: Database | None = None) -> Flask:
    config = config or load_config()
    setup_logging("DEBUG" if config.debug_logging else config.log_level)

    container = Container(config, database=database)
    container.database.create_all()

    try:
        promote_admin(container.user_repository, config.admin_email)
    except AdminSetupError as exc:
        logger.error(f"admin_setup: {exc}")
        container.close()
        raise

    app = Flask(__name__)
    configure_error_handling(app, debug_mode=config.debug_logging)
    configure_request_logging(app, debug_mode=config.debug_logging)

    cors_kwargs: dict[str, object] = {
        "resources": {
            r"/api/*": {"origins": config.security.allowed_origins},
            r"/(signup|login)": {"origins": config.security.allowed_origins},
        }
    }
    if any(o != "*" for o in config.security.allowed_origins):
        cors_kwargs["supports_credentials"] = True
    else:
        # Answer with a literal "*" rather than echoing the caller's origin.
        cors_kwargs["send_wildcard"] = True
    CORS(app, **cors_kwargs)

    app.register_blueprint(container.misc_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_blueprint())
    app.register_blueprint(container.auth_controller.as_root_blueprint())
    app.register_blueprint(container.users_controller.as_blueprint())

    _add_security_headers(app, enable_hsts=config.security.enable_hsts)

    app.extensions["umms"] = container
    if database is None:
        atexit.register(container.close)

    logger.info(f"Flask app initialized (env={config.app_env})")
    return app


def main() -> None:
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=False)


if __name__ == "__main__":
    main()
