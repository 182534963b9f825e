# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, scoped_session, sessionmaker
from sqlalchemy.pool import StaticPool

from umms.shared.config import DatabaseConfig
from umms.shared.logging import logger


class Base(DeclarativeBase):
    pass


def _is_memory_sqlite(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


def build_engine(config: DatabaseConfig) -> Engine:
    if config.url.startswith("sqlite"):
        kwargs: dict[str, object] = {
            "connect_args": {
                "check_same_thread": False,
                "timeout": int(config.pool_timeout),
            }
        }
        if _is_memory_sqlite(config.url):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs = {
            "pool_size": config.pool_size,
            "max_overflow": config.max_overflow,
            "pool_timeout": config.pool_timeout,
        }
    return create_engine(config.url, echo=False, pool_pre_ping=True, **kwargs)


class Database:
    """Process-lifetime handle on the credential store.

    Built once by the application factory and passed to whoever needs a
    session; call :meth:`dispose` on shutdown.
    """

    def __init__(self, config: DatabaseConfig) -> None:
        self.engine = build_engine(config)
        self.session_factory = scoped_session(
            sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        )

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        session = self.session_factory()
        logger.debug("db.session: opened scoped session")
        try:
            yield session
            session.commit()
            logger.debug("db.session: committed scoped session")
        except Exception:
            logger.debug("db.session: error, rolling back")
            session.rollback()
            raise
        finally:
            session.close()
            self.session_factory.remove()

    def create_all(self) -> None:
        from umms.infrastructure.db import models  # noqa: F401  (registers tables)

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema ensured")

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> bool:
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True

    def dispose(self) -> None:
        self.session_factory.remove()
        self.engine.dispose()
        logger.info("Database engine disposed")
