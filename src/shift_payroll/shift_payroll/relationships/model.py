from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..common.serialization import as_dict
from ..core.enums import RelationshipStatus


@dataclass(frozen=True)
class Relationship:
    """Link between a support worker and a service provider."""

    relationship_id: int
    support_worker_id: int
    service_provider_id: int
    status: RelationshipStatus
    hourly_rate: Optional[Decimal] = None

    @property
    def is_active(self) -> bool:
        return self.status == RelationshipStatus.ACTIVE

    def to_dict(self) -> dict:
        return as_dict(self)
