from .audience_resolver import NotificationAudienceResolver
from .lifecycle_service import NotificationLifecycleManager
from .notification_service import NotificationService

__all__ = [
    "NotificationAudienceResolver",
    "NotificationLifecycleManager",
    "NotificationService",
]
