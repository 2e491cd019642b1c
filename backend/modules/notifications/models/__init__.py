from .notification_models import Notification, NotificationCreator, NotificationKind

__all__ = ["Notification", "NotificationCreator", "NotificationKind"]
