# backend/modules/notifications/audience.py

"""
Target audience of a notification.

A notification is addressed either to a role-based group (``Broadcast``) or
to the owner of one reservation (``ReservationTarget``). The variant is
decided once, when a stored value is parsed, and stored back as the group
name or the decimal reservation id.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class AudienceGroup(str, Enum):
    CUSTOMERS = "Customers"
    RESTAURANT_MANAGERS = "RestaurantManagers"
    ALL = "All"


@dataclass(frozen=True)
class Broadcast:
    group: AudienceGroup

    def to_storage(self) -> str:
        return self.group.value


@dataclass(frozen=True)
class ReservationTarget:
    reservation_id: int

    def to_storage(self) -> str:
        return str(self.reservation_id)


TargetAudience = Union[Broadcast, ReservationTarget]

CUSTOMERS = Broadcast(AudienceGroup.CUSTOMERS)
RESTAURANT_MANAGERS = Broadcast(AudienceGroup.RESTAURANT_MANAGERS)
ALL = Broadcast(AudienceGroup.ALL)


def parse_target_audience(raw) -> TargetAudience:
    """
    Build the audience variant from a group name, a reservation id, or an
    existing variant. Any other shape is rejected with ValueError.
    """
    if isinstance(raw, (Broadcast, ReservationTarget)):
        return raw
    if isinstance(raw, AudienceGroup):
        return Broadcast(raw)
    if isinstance(raw, bool):
        raise ValueError(f"Invalid target audience: {raw!r}")
    if isinstance(raw, int):
        if raw < 1:
            raise ValueError(f"Invalid reservation id for target audience: {raw}")
        return ReservationTarget(raw)
    if isinstance(raw, str):
        value = raw.strip()
        for group in AudienceGroup:
            if value == group.value:
                return Broadcast(group)
        if value.isdigit() and int(value) > 0:
            return ReservationTarget(int(value))
    raise ValueError(
        f"Invalid target audience {raw!r}: must be Customers, RestaurantManagers, All or a reservation id"
    )
