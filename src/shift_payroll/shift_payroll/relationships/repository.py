from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import RelationshipStatus
from .model import Relationship


class RelationshipRepository(Protocol):
    def get(self, *, provider_id: int, worker_id: int) -> Optional[Relationship]:
        raise NotImplementedError

    def list_for_provider(self, *, provider_id: int) -> Sequence[Relationship]:
        raise NotImplementedError

    def upsert(
        self,
        *,
        provider_id: int,
        worker_id: int,
        status: RelationshipStatus,
        hourly_rate: Optional[Decimal] = None,
    ) -> int:
        """Create or update the (worker, provider) row.

        Returns relationship_id.
        """

        raise NotImplementedError
