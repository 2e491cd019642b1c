# backend/modules/notifications/services/audience_resolver.py

"""
Role-based notification visibility.

Each role maps to a set of ``AudienceClause`` objects; the repository
returns the rows matching any of them, narrowed by the caller's filters.

Customers see a restaurant manager's ``Customers`` notifications only if
they hold a reservation at that restaurant, and only up to the latest of
those reservations: a notification published after the customer's last
visit is no longer relevant to them.
"""

from datetime import datetime
from typing import Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from core.clock import Clock, system_clock
from core.config import settings
from core.exceptions import (
    AuthorizationError, InternalError, ServiceError, ServiceResult
)
from modules.auth.models.user_models import User, UserRole
from modules.reservations.repositories.reservation_repository import (
    ReservationRepository, SQLAlchemyReservationRepository
)
from ..audience import ALL, CUSTOMERS, RESTAURANT_MANAGERS, ReservationTarget
from ..models.notification_models import Notification, NotificationCreator
from ..repositories.notification_repository import (
    AudienceClause, NotificationRepository, SQLAlchemyNotificationRepository
)
from ..schemas.notification_schemas import (
    NotificationFilters, NotificationItem, NotificationPage, PageLink,
    Pagination, RestaurantPreview
)

logger = logging.getLogger(__name__)


class NotificationAudienceResolver:
    """Builds the paginated list of notifications a user may see"""

    def __init__(
        self,
        db: Session,
        clock: Clock = system_clock,
        notifications: Optional[NotificationRepository] = None,
        reservations: Optional[ReservationRepository] = None,
    ):
        self.db = db
        self.clock = clock
        self.notifications = notifications or SQLAlchemyNotificationRepository(db)
        self.reservations = reservations or SQLAlchemyReservationRepository(db)

    def _manager_clauses(self, user: User, now: datetime) -> List[AudienceClause]:
        if user.restaurant_id is None:
            raise AuthorizationError(
                "Restaurant manager must be associated with a restaurant"
            )
        return [
            # Everything the manager wrote, scheduled or not
            AudienceClause(creator_ids=frozenset({user.id})),
            AudienceClause(
                targets=frozenset({RESTAURANT_MANAGERS.to_storage(), ALL.to_storage()}),
                published_before=now,
            ),
            AudienceClause(
                creator_ids=frozenset({user.id}),
                targets=frozenset({CUSTOMERS.to_storage()}),
                published_before=now,
            ),
        ]

    def _customer_clauses(self, user: User, now: datetime) -> List[AudienceClause]:
        reservations = self.reservations.find_by_user(user.id)

        latest_by_restaurant: Dict[int, datetime] = {}
        for reservation in reservations:
            latest = latest_by_restaurant.get(reservation.restaurant_id)
            if latest is None or reservation.rev_date > latest:
                latest_by_restaurant[reservation.restaurant_id] = reservation.rev_date

        # Manager notices belong to the restaurant they were posted for, whoever
        # manages it today
        clauses = []
        for restaurant_id, latest in latest_by_restaurant.items():
            clauses.append(
                AudienceClause(
                    restaurant_ids=frozenset({restaurant_id}),
                    created_by=frozenset({NotificationCreator.RESTAURANT_MANAGER.value}),
                    targets=frozenset({CUSTOMERS.to_storage()}),
                    published_before=min(now, latest),
                )
            )

        clauses.append(
            AudienceClause(
                created_by=frozenset(
                    {NotificationCreator.ADMIN.value, NotificationCreator.SYSTEM.value}
                ),
                targets=frozenset({CUSTOMERS.to_storage()}),
                published_before=now,
            )
        )
        clauses.append(
            AudienceClause(targets=frozenset({ALL.to_storage()}), published_before=now)
        )
        if reservations:
            clauses.append(
                AudienceClause(
                    targets=frozenset(
                        ReservationTarget(r.id).to_storage() for r in reservations
                    ),
                    published_before=now,
                )
            )
        clauses.append(
            AudienceClause(recipient_ids=frozenset({user.id}), published_before=now)
        )
        return clauses

    def audience_clauses(self, user: Optional[User]) -> Optional[List[AudienceClause]]:
        """Visibility predicate for the user; None means unrestricted"""
        if user is None or user.role is None:
            raise AuthorizationError("User role is missing")

        now = self.clock.now()
        if user.role == UserRole.ADMIN:
            return None
        if user.role == UserRole.RESTAURANT_MANAGER:
            return self._manager_clauses(user, now)
        if user.role == UserRole.CUSTOMER:
            return self._customer_clauses(user, now)
        raise AuthorizationError(f"Unrecognised user role '{user.role}'")

    def _to_item(
        self, notification: Notification, fields: Optional[List[str]]
    ) -> NotificationItem:
        selected = fields or NotificationItem.model_fields.keys() - {"restaurant"}
        values = {field: getattr(notification, field) for field in selected}

        include_restaurant = fields is None or "restaurant_id" in fields
        if (
            include_restaurant
            and notification.created_by == NotificationCreator.RESTAURANT_MANAGER
            and notification.restaurant is not None
        ):
            values["restaurant"] = RestaurantPreview.model_validate(
                notification.restaurant.preview()
            )
        return NotificationItem(**values)

    async def visible_notifications(
        self,
        requesting_user: Optional[User],
        filters: Optional[NotificationFilters] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> ServiceResult[NotificationPage]:
        """List the notifications visible to the requesting user, one page at a time"""
        filters = filters or NotificationFilters()
        page = max(page or 1, 1)
        limit = min(max(limit or settings.notification_page_size, 1), settings.notification_max_page_size)
        offset = (page - 1) * limit

        try:
            clauses = self.audience_clauses(requesting_user)
            items, total = self.notifications.find_visible(clauses, filters, offset, limit)
        except ServiceError as e:
            logger.info(f"Notification listing refused: {e.detail}")
            return ServiceResult.failure(e)
        except Exception as e:
            self.db.rollback()
            logger.exception(f"Error fetching notifications: {e}")
            return ServiceResult.failure(
                InternalError(str(e), public_message="Cannot fetch notifications")
            )

        pagination = Pagination()
        if offset + limit < total:
            pagination.next = PageLink(page=page + 1, limit=limit)
        if page > 1:
            pagination.prev = PageLink(page=page - 1, limit=limit)

        fields = filters.select_fields()
        result = NotificationPage(
            count=len(items),
            total=total,
            pagination=pagination,
            items=[self._to_item(n, fields) for n in items],
        )
        return ServiceResult.success(result)
