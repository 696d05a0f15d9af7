from __future__ import annotations

from typing import Iterable, Mapping, Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import User
from .repository import UserRepository


def _row_to_user(r: dict) -> User:
    return User(
        user_id=int(r["user_id"]),
        full_name=r["full_name"],
        email=r.get("email"),
        role=Role(r["role"]),
        company_name=r.get("company_name"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, full_name, email, role, company_name
                FROM users
                WHERE user_id=%s
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _row_to_user(r) if r else None

    def get_many(self, user_ids: Iterable[int]) -> Mapping[int, User]:
        ids = sorted({int(i) for i in user_ids})
        if not ids:
            return {}
        placeholders, params = in_clause(ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT user_id, full_name, email, role, company_name
                FROM users
                WHERE user_id IN ({placeholders})
                """,
                params,
            )
            return {int(r["user_id"]): _row_to_user(r) for r in fetchall(cur)}
