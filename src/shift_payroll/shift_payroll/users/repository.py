from __future__ import annotations

from typing import Iterable, Mapping, Optional, Protocol

from .model import User


class UserRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_many(self, user_ids: Iterable[int]) -> Mapping[int, User]:
        """Batch lookup keyed by user_id; unknown ids are simply absent."""

        raise NotImplementedError
