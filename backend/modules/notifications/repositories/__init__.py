from .notification_repository import (
    AudienceClause,
    NotificationRepository,
    SQLAlchemyNotificationRepository,
)

__all__ = ["AudienceClause", "NotificationRepository", "SQLAlchemyNotificationRepository"]
