# backend/modules/notifications/services/lifecycle_service.py

"""
Keeps reservation-linked notifications in step with the reservations they
refer to.

These methods run inside the caller's transaction: they flush through the
repository and never commit.
"""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional
import logging

from sqlalchemy.orm import Session

from core.clock import Clock, system_clock
from core.config import settings
from modules.reservations.models.reservation_models import Reservation
from modules.restaurants.models.restaurant_models import Restaurant
from ..audience import ReservationTarget
from ..models.notification_models import (
    Notification, NotificationCreator, NotificationKind
)
from ..repositories.notification_repository import (
    NotificationRepository, SQLAlchemyNotificationRepository
)

logger = logging.getLogger(__name__)

REMINDER_TITLE = "Reservation Reminder"
CANCELLATION_TITLE = "Reservation Cancelled"


class NotificationLifecycleManager:
    """Schedules, reschedules and cancels reservation reminders"""

    def __init__(
        self,
        db: Session,
        clock: Clock = system_clock,
        notifications: Optional[NotificationRepository] = None,
        reminder_lead: Optional[timedelta] = None,
    ):
        self.db = db
        self.clock = clock
        self.notifications = notifications or SQLAlchemyNotificationRepository(db)
        self.reminder_lead = reminder_lead or timedelta(hours=settings.reminder_lead_hours)

    def reminder_publish_at(self, rev_date: datetime) -> datetime:
        """Reminder goes out one lead period before the reservation, never in the past"""
        publish_at = self.clock.to_utc(rev_date) - self.reminder_lead
        return max(publish_at, self.clock.now())

    def _local_label(self, reservation: Reservation, restaurant: Restaurant) -> str:
        local = self.clock.to_local(reservation.rev_date, restaurant.timezone or "UTC")
        return local.strftime("%Y-%m-%d %H:%M")

    def _reminder_values(self, reservation: Reservation, restaurant: Restaurant) -> dict:
        people = reservation.number_of_people
        return {
            "title": REMINDER_TITLE,
            "message": (
                f"Your reservation at {restaurant.name} for {people} "
                f"{'person' if people == 1 else 'people'} is on "
                f"{self._local_label(reservation, restaurant)}."
            ),
            "publish_at": self.reminder_publish_at(reservation.rev_date),
        }

    def _refresh_existing(
        self, reservation: Reservation, values: dict
    ) -> Optional[Notification]:
        target = ReservationTarget(reservation.id).to_storage()
        existing = self.notifications.find_by_target(target, kind=NotificationKind.REMINDER)
        if not existing:
            return None

        reminder = self.notifications.update(existing[0], values)
        for duplicate in existing[1:]:
            self.notifications.delete(duplicate.id)
        logger.debug(f"Updated reminder {reminder.id} for reservation {reservation.id}")
        return reminder

    def schedule_reminder(self, reservation: Reservation, restaurant: Restaurant) -> Notification:
        """
        Create the reservation's reminder, or refresh it when one exists.

        At most one reminder exists per reservation, so calling this twice
        for the same reservation leaves a single up-to-date row.
        """
        values = self._reminder_values(reservation, restaurant)
        reminder = self._refresh_existing(reservation, values)
        if reminder is not None:
            return reminder

        reminder = self.notifications.create(
            creator_id=None,
            created_by=NotificationCreator.SYSTEM,
            restaurant_id=restaurant.id,
            target_audience=ReservationTarget(reservation.id).to_storage(),
            kind=NotificationKind.REMINDER,
            recipient_id=reservation.user_id,
            **values,
        )
        logger.debug(f"Scheduled reminder {reminder.id} for reservation {reservation.id}")
        return reminder

    def reschedule_reminder(
        self, reservation: Reservation, restaurant: Restaurant
    ) -> Optional[Notification]:
        """Recompute an existing reminder; reservations without one are left alone"""
        return self._refresh_existing(
            reservation, self._reminder_values(reservation, restaurant)
        )

    def cancel_reminders(self, reservation_id: int) -> int:
        """Delete every notification addressed to the reservation"""
        deleted = self.notifications.delete_where(
            targets=[ReservationTarget(reservation_id).to_storage()]
        )
        logger.debug(f"Removed {deleted} notifications for reservation {reservation_id}")
        return deleted

    def cancel_for_recipient(self, user_id: int) -> int:
        """Delete every notification addressed to the user personally"""
        deleted = self.notifications.delete_where(recipient_ids=[user_id])
        logger.debug(f"Removed {deleted} notifications addressed to user {user_id}")
        return deleted

    def cancel_for_restaurant(
        self, restaurant: Restaurant, affected_reservations: Iterable[Reservation]
    ) -> List[Notification]:
        """
        Tell each affected customer their reservation is gone, then drop the
        reminders of those reservations.

        The notices are addressed to the reservation owner through
        ``recipient_id`` so they stay visible after the reservation is deleted.
        """
        affected = list(affected_reservations)
        if not affected:
            return []

        now = self.clock.now()
        notices = self.notifications.create_many(
            {
                "title": CANCELLATION_TITLE,
                "message": (
                    f"Your reservation at {restaurant.name} on "
                    f"{self._local_label(reservation, restaurant)} has been cancelled "
                    f"because the restaurant is no longer available."
                ),
                "creator_id": None,
                "created_by": NotificationCreator.SYSTEM,
                "restaurant_id": None,
                "target_audience": ReservationTarget(reservation.id).to_storage(),
                "kind": NotificationKind.CANCELLATION,
                "recipient_id": reservation.user_id,
                "publish_at": now,
            }
            for reservation in affected
        )

        self.notifications.delete_where(
            targets=[ReservationTarget(r.id).to_storage() for r in affected],
            kind=NotificationKind.REMINDER,
        )
        logger.info(
            f"Sent {len(notices)} cancellation notices for restaurant {restaurant.id}"
        )
        return notices
