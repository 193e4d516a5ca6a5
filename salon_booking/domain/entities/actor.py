from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ActorRole(str, Enum):
    customer = "customer"
    staff = "staff"
    salon_owner = "salon-owner"
    super_admin = "super-admin"


@dataclass(frozen=True)
class Actor:
    user_id: str
    role: ActorRole = ActorRole.customer
    salon_id: str | None = None  # set for salon owners and staff

    @property
    def is_privileged(self) -> bool:
        return self.role != ActorRole.customer
