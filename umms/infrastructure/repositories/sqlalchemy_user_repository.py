# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime
from typing import cast

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError

from umms.domain.users.entities import Role, UserPage, UserQuery
from umms.domain.users.entities import User as DomainUser
from umms.domain.users.exceptions import EmailInUseError, UserAlreadyExistsError
from umms.domain.users.repositories import UserRepository
from umms.infrastructure.db.models import User
from umms.infrastructure.db.session import Database


def _aware(value: datetime | None) -> datetime | None:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _to_domain(row: User) -> DomainUser:
    created_at = cast(datetime, _aware(row.created_at))
    return DomainUser(
        id=row.id,
        email=row.email,
        username=row.username,
        password_hash=row.password_hash,
        first_name=row.first_name,
        last_name=row.last_name,
        role=Role(row.role),
        created_at=created_at,
        updated_at=_aware(row.updated_at),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    def find_by_email(self, email: str) -> DomainUser | None:
        with self._db.session_scope() as session:
            row = session.scalars(select(User).where(User.email == email.lower())).first()
            return _to_domain(row) if row else None

    def find_by_id(self, user_id: str) -> DomainUser | None:
        with self._db.session_scope() as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def find_by_username(self, username: str) -> DomainUser | None:
        with self._db.session_scope() as session:
            row = session.scalars(select(User).where(User.username == username)).first()
            return _to_domain(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with self._db.session_scope() as session:
                row = User(
                    id=user.id,
                    email=user.email,
                    username=user.username,
                    password_hash=user.password_hash,
                    first_name=user.first_name,
                    last_name=user.last_name,
                    role=user.role.value,
                    created_at=user.created_at,
                    updated_at=user.updated_at or user.created_at,
                )
                session.add(row)
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            # Lost a race against a concurrent signup for the same email.
            raise UserAlreadyExistsError() from exc

    def update(self, user: DomainUser) -> DomainUser:
        try:
            with self._db.session_scope() as session:
                row = session.get(User, user.id)
                if row is None:
                    raise LookupError(f"user {user.id} vanished during update")
                row.email = user.email
                row.username = user.username
                row.password_hash = user.password_hash
                row.first_name = user.first_name
                row.last_name = user.last_name
                row.role = user.role.value
                row.updated_at = user.updated_at or datetime.now(UTC)
                session.flush()
                return _to_domain(row)
        except IntegrityError as exc:
            # Another admin claimed the same email between pre-check and commit.
            raise EmailInUseError() from exc

    def delete(self, user_id: str) -> bool:
        with self._db.session_scope() as session:
            row = session.get(User, user_id)
            if row is None:
                return False
            session.delete(row)
            return True

    def search(self, query: UserQuery) -> UserPage:
        stmt = select(User)
        if query.search:
            pattern = f"%{query.search.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(User.first_name).like(pattern),
                    func.lower(User.last_name).like(pattern),
                    func.lower(User.email).like(pattern),
                    func.lower(User.username).like(pattern),
                )
            )
        if query.role:
            stmt = stmt.where(User.role == query.role.value)

        with self._db.session_scope() as session:
            total = session.scalar(select(func.count()).select_from(stmt.subquery())) or 0
            rows = session.scalars(
                stmt.order_by(User.created_at.desc()).offset(query.offset).limit(query.limit)
            ).all()
            return UserPage(
                users=[_to_domain(row) for row in rows],
                total=total,
                page=query.page,
                limit=query.limit,
            )
