from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Identity read model used for enrichment (names, e-mails, company).

    Note: Credentials live in the external identity service, not here.
    """

    user_id: int
    full_name: str
    email: Optional[str]
    role: Role
    company_name: Optional[str] = None
