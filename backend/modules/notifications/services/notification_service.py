# backend/modules/notifications/services/notification_service.py

"""
Creation and deletion of announcements by administrators and restaurant
managers.
"""

from typing import Optional, Union
import logging

import pydantic
from fastapi import status
from sqlalchemy.orm import Session

from core.audit_logger import AdminAuditLogger
from core.clock import Clock, system_clock
from core.exceptions import (
    AuthorizationError, InternalError, NotFoundError, ServiceError,
    ServiceResult, ValidationError
)
from modules.auth.models.user_models import User, UserRole
from ..audience import CUSTOMERS
from ..models.notification_models import (
    Notification, NotificationCreator, NotificationKind
)
from ..repositories.notification_repository import (
    NotificationRepository, SQLAlchemyNotificationRepository
)
from ..schemas.notification_schemas import NotificationCreate

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for managing announcements"""

    def __init__(
        self,
        db: Session,
        clock: Clock = system_clock,
        notifications: Optional[NotificationRepository] = None,
        audit_logger: Optional[AdminAuditLogger] = None,
    ):
        self.db = db
        self.clock = clock
        self.notifications = notifications or SQLAlchemyNotificationRepository(db)
        self.audit_logger = audit_logger or AdminAuditLogger(db)

    def _parse_payload(self, payload: Union[NotificationCreate, dict]) -> NotificationCreate:
        if isinstance(payload, NotificationCreate):
            return payload
        try:
            return NotificationCreate.model_validate(payload)
        except pydantic.ValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise ValidationError(messages)

    def _origin(self, user: User, data: NotificationCreate) -> dict:
        """Creator fields and audience for the requesting user's role"""
        if user.role == UserRole.ADMIN:
            if data.target_audience is None:
                raise ValidationError("targetAudience is required for admin")
            return {
                "creator_id": user.id,
                "created_by": NotificationCreator.ADMIN,
                "restaurant_id": None,
                "target_audience": data.target_audience,
            }

        if user.role == UserRole.RESTAURANT_MANAGER:
            if not user.verified:
                raise ValidationError(
                    "Restaurant manager must be verified to create notifications"
                )
            if user.restaurant_id is None:
                raise ValidationError(
                    "Restaurant manager must be associated with a restaurant"
                )
            # Managers can only address their own customers
            return {
                "creator_id": user.id,
                "created_by": NotificationCreator.RESTAURANT_MANAGER,
                "restaurant_id": user.restaurant_id,
                "target_audience": CUSTOMERS.to_storage(),
            }

        raise AuthorizationError("Invalid user role")

    async def create_notification(
        self, requesting_user: User, payload: Union[NotificationCreate, dict]
    ) -> ServiceResult[Notification]:
        """Create an announcement on behalf of an admin or a restaurant manager"""
        try:
            data = self._parse_payload(payload)
            origin = self._origin(requesting_user, data)

            now = self.clock.now()
            publish_at = now
            if data.publish_at is not None:
                publish_at = self.clock.to_utc(data.publish_at)
                if publish_at < now:
                    raise ValidationError("publishAt cannot be in the past")

            notification = self.notifications.create(
                title=data.title,
                message=data.message,
                kind=NotificationKind.ANNOUNCEMENT,
                publish_at=publish_at,
                **origin,
            )

            if requesting_user.role == UserRole.ADMIN:
                self.audit_logger.log_admin_action(
                    requesting_user.id, "Create", "Notification", notification.id
                )

            self.db.commit()
            self.db.refresh(notification)
        except ServiceError as e:
            self.db.rollback()
            logger.info(f"Notification creation refused: {e.detail}")
            return ServiceResult.failure(e)
        except Exception as e:
            self.db.rollback()
            logger.exception(f"Error creating notification: {e}")
            return ServiceResult.failure(
                InternalError(str(e), public_message="Cannot create notification")
            )

        logger.info(f"Notification {notification.id} created by user {requesting_user.id}")
        return ServiceResult.success(notification, status_code=status.HTTP_201_CREATED)

    async def delete_notification(
        self, notification_id: int, requesting_user: User
    ) -> ServiceResult[None]:
        """Delete a notification; only its creator or an admin may do so"""
        try:
            notification = self.notifications.get(notification_id)
            if notification is None:
                raise NotFoundError(f"No notification found with ID of {notification_id}")

            is_admin = requesting_user.role == UserRole.ADMIN
            if notification.creator_id != requesting_user.id and not is_admin:
                raise AuthorizationError("Not authorized to delete this notification")

            self.notifications.delete(notification_id)

            if is_admin:
                self.audit_logger.log_admin_action(
                    requesting_user.id, "Delete", "Notification", notification_id
                )

            self.db.commit()
        except ServiceError as e:
            self.db.rollback()
            logger.info(f"Notification deletion refused: {e.detail}")
            return ServiceResult.failure(e)
        except Exception as e:
            self.db.rollback()
            logger.exception(f"Error deleting notification {notification_id}: {e}")
            return ServiceResult.failure(
                InternalError(str(e), public_message="Cannot delete notification")
            )

        logger.info(f"Notification {notification_id} deleted by user {requesting_user.id}")
        return ServiceResult.success(None)
