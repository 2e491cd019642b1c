# backend/modules/notifications/models/notification_models.py

"""
Notifications published to customers, restaurant managers, or the owner of
a single reservation.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Text, Enum, Index
from sqlalchemy.orm import relationship, validates, reconstructor
from sqlalchemy.sql import func
from core.database import Base
import enum

from ..audience import TargetAudience, parse_target_audience


class NotificationCreator(str, enum.Enum):
    """Who created the notification"""

    ADMIN = "admin"
    RESTAURANT_MANAGER = "restaurantManager"
    SYSTEM = "system"


class NotificationKind(str, enum.Enum):
    ANNOUNCEMENT = "announcement"
    REMINDER = "reminder"
    CANCELLATION = "cancellation"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)

    # Origin
    creator_id = Column(Integer, index=True)
    created_by = Column(
        Enum(NotificationCreator, values_callable=_enum_values), nullable=False
    )
    restaurant_id = Column(
        Integer, ForeignKey("restaurants.id", ondelete="SET NULL"), index=True
    )

    # Audience: group name or reservation id (see modules.notifications.audience)
    target_audience = Column(String(64), nullable=False, index=True)
    kind = Column(
        Enum(NotificationKind, values_callable=_enum_values),
        nullable=False,
        default=NotificationKind.ANNOUNCEMENT,
    )
    recipient_id = Column(Integer, index=True)  # System notices addressed to one user

    # Not shown to the audience before this instant (naive UTC)
    publish_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    restaurant = relationship("Restaurant", lazy="joined")

    __table_args__ = (
        Index("idx_notification_audience_publish", "target_audience", "publish_at"),
        Index("idx_notification_creator_publish", "creator_id", "publish_at"),
    )

    @validates("target_audience")
    def validate_target_audience(self, key, value):
        self._target = parse_target_audience(value)
        return self._target.to_storage()

    @reconstructor
    def _load_target(self):
        self._target = parse_target_audience(self.target_audience)

    @property
    def target(self) -> TargetAudience:
        return self._target

    def __repr__(self):
        return f"<Notification {self.id} {self.created_by} -> {self.target_audience}>"
