from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.numbers import to_decimal
from ..core.enums import RelationshipStatus
from ..core.exceptions import AuthorizationError
from .model import Relationship
from .repository import RelationshipRepository

logger = logging.getLogger(__name__)


class RelationshipGuard:
    """Single place for cross-entity access checks between providers and workers.

    Every shift, timesheet and payslip operation that spans a worker and a
    provider goes through :meth:`authorize`. A missing relationship row is an
    authorization failure, never a not-found.
    """

    def __init__(self, relationships: RelationshipRepository):
        self._relationships = relationships

    def authorize(self, provider_id: int, worker_id: int, *, require_active: bool = False) -> Relationship:
        rel = self._relationships.get(provider_id=int(provider_id), worker_id=int(worker_id))
        if rel is None:
            logger.warning("No relationship between provider=%s and worker=%s", provider_id, worker_id)
            raise AuthorizationError("Worker not assigned to this provider")
        if require_active and not rel.is_active:
            logger.warning("Inactive relationship between provider=%s and worker=%s", provider_id, worker_id)
            raise AuthorizationError("Relationship with this worker is inactive")
        return rel

    @staticmethod
    def ensure_owner(provider_id: int, owner_provider_id: int, what: str) -> None:
        if int(provider_id) != int(owner_provider_id):
            raise AuthorizationError(f"Not authorized to access this {what}")

    @staticmethod
    def ensure_worker(worker_id: int, owner_worker_id: int, what: str) -> None:
        if int(worker_id) != int(owner_worker_id):
            raise AuthorizationError(f"Not authorized to access this {what}")

    @staticmethod
    def ensure_party(actor_id: int, *, provider_id: int, worker_id: int, what: str) -> None:
        """Actor must be either side of the entity (its provider or its worker)."""
        if int(actor_id) not in {int(provider_id), int(worker_id)}:
            raise AuthorizationError(f"Not authorized to access this {what}")

    def list_for_provider(self, provider_id: int) -> Sequence[Relationship]:
        return self._relationships.list_for_provider(provider_id=int(provider_id))

    def link(
        self,
        *,
        provider_id: int,
        worker_id: int,
        status: RelationshipStatus = RelationshipStatus.ACTIVE,
        hourly_rate: Optional[object] = None,
    ) -> Relationship:
        rate = to_decimal(hourly_rate, "hourly_rate") if hourly_rate is not None else None
        self._relationships.upsert(
            provider_id=int(provider_id),
            worker_id=int(worker_id),
            status=status,
            hourly_rate=rate,
        )
        logger.info("Linked worker=%s to provider=%s (%s)", worker_id, provider_id, status.value)
        return self.authorize(provider_id, worker_id)
