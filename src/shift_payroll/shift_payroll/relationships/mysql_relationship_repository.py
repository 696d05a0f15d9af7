from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import RelationshipStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Relationship
from .repository import RelationshipRepository


def _row_to_relationship(r: dict) -> Relationship:
    return Relationship(
        relationship_id=int(r["relationship_id"]),
        support_worker_id=int(r["support_worker_id"]),
        service_provider_id=int(r["service_provider_id"]),
        status=RelationshipStatus(r["status"]),
        hourly_rate=r.get("hourly_rate"),
    )


class MySQLRelationshipRepository(RelationshipRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, provider_id: int, worker_id: int) -> Optional[Relationship]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT relationship_id, support_worker_id, service_provider_id, status, hourly_rate
                FROM worker_provider_relationships
                WHERE service_provider_id=%s AND support_worker_id=%s
                """,
                (int(provider_id), int(worker_id)),
            )
            r = fetchone(cur)
            return _row_to_relationship(r) if r else None

    def list_for_provider(self, *, provider_id: int) -> Sequence[Relationship]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT relationship_id, support_worker_id, service_provider_id, status, hourly_rate
                FROM worker_provider_relationships
                WHERE service_provider_id=%s
                ORDER BY support_worker_id ASC
                """,
                (int(provider_id),),
            )
            return [_row_to_relationship(r) for r in fetchall(cur)]

    def upsert(
        self,
        *,
        provider_id: int,
        worker_id: int,
        status: RelationshipStatus,
        hourly_rate: Optional[Decimal] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO worker_provider_relationships(support_worker_id, service_provider_id, status, hourly_rate)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status), hourly_rate=VALUES(hourly_rate)
                """,
                (int(worker_id), int(provider_id), status.value, hourly_rate),
            )

            # If it was an update, lastrowid can be 0; fetch relationship_id.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute(
                "SELECT relationship_id FROM worker_provider_relationships WHERE support_worker_id=%s AND service_provider_id=%s",
                (int(worker_id), int(provider_id)),
            )
            r = fetchone(cur)
            return int(r["relationship_id"]) if r else 0
