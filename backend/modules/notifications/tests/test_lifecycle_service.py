# backend/modules/notifications/tests/test_lifecycle_service.py

import pytest
from datetime import datetime, timedelta
from sqlalchemy.orm import Session

from modules.notifications.audience import ReservationTarget
from modules.notifications.models.notification_models import (
    Notification,
    NotificationCreator,
    NotificationKind,
)
from modules.notifications.services.lifecycle_service import NotificationLifecycleManager
from tests.factories import NotificationFactory, ReservationFactory, RestaurantFactory


@pytest.fixture
def lifecycle(db_session: Session, clock):
    return NotificationLifecycleManager(db_session, clock=clock)


def notifications_for(db_session: Session, reservation_id: int, kind=None):
    query = db_session.query(Notification).filter(
        Notification.target_audience == str(reservation_id)
    )
    if kind is not None:
        query = query.filter(Notification.kind == kind)
    return query.all()


class TestReminderPublishAt:
    def test_one_day_ahead(self, lifecycle):
        assert lifecycle.reminder_publish_at(datetime(2030, 6, 5, 19, 0)) == datetime(2030, 6, 4, 19, 0)

    def test_clamped_to_now(self, lifecycle, clock):
        assert lifecycle.reminder_publish_at(clock.now() + timedelta(hours=3)) == clock.now()

    def test_custom_lead(self, db_session, clock):
        lifecycle = NotificationLifecycleManager(
            db_session, clock=clock, reminder_lead=timedelta(hours=2)
        )

        assert lifecycle.reminder_publish_at(datetime(2030, 6, 5, 19, 0)) == datetime(2030, 6, 5, 17, 0)


class TestScheduleReminder:
    def test_creates_reminder(self, lifecycle, db_session):
        reservation = ReservationFactory(rev_date=datetime(2030, 6, 5, 19, 0), number_of_people=1)

        reminder = lifecycle.schedule_reminder(reservation, reservation.restaurant)
        db_session.commit()

        assert reminder.target == ReservationTarget(reservation.id)
        assert reminder.kind == NotificationKind.REMINDER
        assert reminder.created_by == NotificationCreator.SYSTEM
        assert reminder.recipient_id == reservation.user_id
        assert reminder.restaurant_id == reservation.restaurant_id
        assert "for 1 person is on 2030-06-05 19:00" in reminder.message

    def test_message_uses_restaurant_local_time(self, lifecycle):
        restaurant = RestaurantFactory(timezone="Asia/Bangkok")
        reservation = ReservationFactory(restaurant=restaurant,
                                         rev_date=datetime(2030, 6, 5, 12, 0))

        reminder = lifecycle.schedule_reminder(reservation, restaurant)

        assert "2030-06-05 19:00" in reminder.message

    def test_reschedule_is_idempotent(self, lifecycle, db_session):
        reservation = ReservationFactory(rev_date=datetime(2030, 6, 5, 19, 0))

        lifecycle.schedule_reminder(reservation, reservation.restaurant)
        lifecycle.reschedule_reminder(reservation, reservation.restaurant)
        lifecycle.reschedule_reminder(reservation, reservation.restaurant)
        db_session.commit()

        assert len(notifications_for(db_session, reservation.id, NotificationKind.REMINDER)) == 1

    def test_reschedule_follows_new_time(self, lifecycle, db_session):
        reservation = ReservationFactory(rev_date=datetime(2030, 6, 5, 19, 0))
        lifecycle.schedule_reminder(reservation, reservation.restaurant)

        reservation.rev_date = datetime(2030, 6, 7, 12, 0)
        reminder = lifecycle.reschedule_reminder(reservation, reservation.restaurant)

        assert reminder.publish_at == datetime(2030, 6, 6, 12, 0)
        assert "2030-06-07 12:00" in reminder.message

    def test_reschedule_collapses_duplicates(self, lifecycle, db_session):
        reservation = ReservationFactory(rev_date=datetime(2030, 6, 5, 19, 0))
        for _ in range(2):
            NotificationFactory(target_audience=str(reservation.id),
                                created_by=NotificationCreator.SYSTEM,
                                kind=NotificationKind.REMINDER)

        lifecycle.reschedule_reminder(reservation, reservation.restaurant)
        db_session.commit()

        assert len(notifications_for(db_session, reservation.id, NotificationKind.REMINDER)) == 1


    def test_reschedule_without_reminder_creates_nothing(self, lifecycle, db_session):
        reservation = ReservationFactory(rev_date=datetime(2030, 6, 5, 19, 0))

        assert lifecycle.reschedule_reminder(reservation, reservation.restaurant) is None
        db_session.commit()

        assert notifications_for(db_session, reservation.id) == []


class TestCancellation:
    def test_cancel_reminders_removes_every_linked_notification(self, lifecycle, db_session):
        reservation = ReservationFactory()
        lifecycle.schedule_reminder(reservation, reservation.restaurant)
        NotificationFactory(target_audience=str(reservation.id), created_by=NotificationCreator.SYSTEM)
        NotificationFactory(target_audience="All")

        assert lifecycle.cancel_reminders(reservation.id) == 2
        db_session.commit()

        assert notifications_for(db_session, reservation.id) == []
        assert db_session.query(Notification).count() == 1

    def test_cancel_for_restaurant(self, lifecycle, db_session, clock):
        restaurant = RestaurantFactory(name="Baan Suan")
        reservations = [
            ReservationFactory(restaurant=restaurant, rev_date=datetime(2030, 6, 5, hour, 0))
            for hour in (12, 18)
        ]
        for reservation in reservations:
            lifecycle.schedule_reminder(reservation, restaurant)

        notices = lifecycle.cancel_for_restaurant(restaurant, reservations)
        db_session.commit()

        assert len(notices) == 2
        assert {n.recipient_id for n in notices} == {r.user_id for r in reservations}
        for notice in notices:
            assert notice.kind == NotificationKind.CANCELLATION
            assert notice.created_by == NotificationCreator.SYSTEM
            assert notice.publish_at == clock.now()
            assert "Baan Suan" in notice.message
        for reservation in reservations:
            assert notifications_for(db_session, reservation.id, NotificationKind.REMINDER) == []
            assert len(notifications_for(db_session, reservation.id)) == 1

    def test_cancel_for_restaurant_without_reservations(self, lifecycle):
        assert lifecycle.cancel_for_restaurant(RestaurantFactory(), []) == []

    def test_cancel_for_recipient_keeps_other_users_notices(self, lifecycle, db_session):
        mine, theirs = ReservationFactory(), ReservationFactory()
        for reservation in (mine, theirs):
            NotificationFactory(created_by=NotificationCreator.SYSTEM,
                                target_audience=str(reservation.id),
                                kind=NotificationKind.CANCELLATION,
                                recipient_id=reservation.user_id)

        assert lifecycle.cancel_for_recipient(mine.user_id) == 1
        db_session.commit()

        remaining = db_session.query(Notification).one()
        assert remaining.recipient_id == theirs.user_id
