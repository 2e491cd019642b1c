# backend/tests/factories/notifications.py

from datetime import datetime

from factory import Sequence
from .base import BaseFactory
from modules.notifications.models.notification_models import (
    Notification, NotificationCreator, NotificationKind
)


class NotificationFactory(BaseFactory):
    """Admin announcement to everyone, already published."""

    class Meta:
        model = Notification

    title = Sequence(lambda n: f"Announcement {n}")
    message = "Hello from the platform"
    creator_id = None
    created_by = NotificationCreator.ADMIN
    restaurant_id = None
    target_audience = "All"
    kind = NotificationKind.ANNOUNCEMENT
    recipient_id = None
    publish_at = datetime(2030, 5, 1, 12, 0)
