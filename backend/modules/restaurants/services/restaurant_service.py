# backend/modules/restaurants/services/restaurant_service.py

from typing import Optional
import logging

from sqlalchemy.orm import Session

from core.audit_logger import AdminAuditLogger
from core.clock import Clock, system_clock
from core.exceptions import (
    AuthorizationError, InternalError, NotFoundError, ServiceError, ServiceResult
)
from modules.auth.models.user_models import User, UserRole
from modules.auth.repositories.user_repository import (
    SQLAlchemyUserRepository, UserRepository
)
from modules.notifications.repositories.notification_repository import (
    NotificationRepository, SQLAlchemyNotificationRepository
)
from modules.notifications.services.lifecycle_service import NotificationLifecycleManager
from modules.reservations.repositories.reservation_repository import (
    ReservationRepository, SQLAlchemyReservationRepository
)
from ..repositories.restaurant_repository import (
    RestaurantRepository, SQLAlchemyRestaurantRepository
)

logger = logging.getLogger(__name__)


class RestaurantService:
    """Service for removing restaurants and everything that hangs off them"""

    def __init__(
        self,
        db: Session,
        clock: Clock = system_clock,
        restaurants: Optional[RestaurantRepository] = None,
        reservations: Optional[ReservationRepository] = None,
        users: Optional[UserRepository] = None,
        notifications: Optional[NotificationRepository] = None,
        lifecycle: Optional[NotificationLifecycleManager] = None,
        audit_logger: Optional[AdminAuditLogger] = None,
    ):
        self.db = db
        self.clock = clock
        self.restaurants = restaurants or SQLAlchemyRestaurantRepository(db)
        self.reservations = reservations or SQLAlchemyReservationRepository(db)
        self.users = users or SQLAlchemyUserRepository(db)
        self.notifications = notifications or SQLAlchemyNotificationRepository(db)
        self.lifecycle = lifecycle or NotificationLifecycleManager(
            db, clock=clock, notifications=self.notifications
        )
        self.audit_logger = audit_logger or AdminAuditLogger(db)

    async def delete_restaurant(
        self, restaurant_id: int, requesting_user: User
    ) -> ServiceResult[None]:
        """
        Remove a restaurant.

        Customers holding reservations there get a cancellation notice; the
        reservations, the manager's announcements and the manager account
        go with the restaurant.
        """
        try:
            if requesting_user.role != UserRole.ADMIN:
                raise AuthorizationError("Only an admin can delete a restaurant")

            restaurant = self.restaurants.get(restaurant_id, for_update=True)
            if restaurant is None:
                raise NotFoundError(f"No restaurant with the id of {restaurant_id}")

            affected = self.reservations.find_by_restaurant(restaurant_id)
            self.lifecycle.cancel_for_restaurant(restaurant, affected)
            self.reservations.delete_many(restaurant_id=restaurant_id)

            manager_ids = self.users.delete_managers_of(restaurant_id)
            if manager_ids:
                self.notifications.delete_where(creator_ids=manager_ids)

            self.restaurants.delete(restaurant_id)
            self.audit_logger.log_admin_action(
                requesting_user.id, "Delete", "Restaurant", restaurant_id
            )

            self.db.commit()
        except ServiceError as e:
            self.db.rollback()
            logger.info(f"Restaurant deletion refused: {e.detail}")
            return ServiceResult.failure(e)
        except Exception as e:
            self.db.rollback()
            logger.exception(f"Error deleting restaurant {restaurant_id}: {e}")
            return ServiceResult.failure(
                InternalError(str(e), public_message="Cannot delete restaurant")
            )

        logger.info(
            f"Restaurant {restaurant_id} deleted with {len(affected)} reservations "
            f"and {len(manager_ids)} manager accounts"
        )
        return ServiceResult.success(None)
