# backend/modules/reservations/services/reservation_service.py

"""
Reservation admission control.

Every create, update and delete request runs through an ordered pipeline of
checks; the first failing check decides the error returned:

1. the restaurant exists and is verified
2. the reservation falls within the restaurant's opening hours
3. the restaurant's daily capacity is not exceeded
4. non-admins stay within their daily reservation quota
5. the owner's reservations keep the minimum gap between them
6. (updates and deletes) the requester owns the reservation or is an admin,
   and non-admins do not change it too close to its scheduled time

The checks and the write share one transaction. It starts by locking the
restaurant row and the owner's user row, so two admissions for the same
restaurant or the same user cannot both pass the capacity, quota or gap
checks on stale counts.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Union
import logging

import pydantic
from fastapi import status
from sqlalchemy.orm import Session

from core.audit_logger import AdminAuditLogger
from core.clock import Clock, system_clock
from core.config import Settings, settings as default_settings
from core.exceptions import (
    AuthorizationError, CapacityError, ConflictError, InternalError,
    NotFoundError, PreconditionError, QuotaError, ServiceError, ServiceResult,
    TooLateError, ValidationError
)
from modules.auth.models.user_models import User, UserRole
from modules.auth.repositories.user_repository import (
    SQLAlchemyUserRepository, UserRepository
)
from modules.notifications.services.lifecycle_service import NotificationLifecycleManager
from modules.restaurants.models.restaurant_models import Restaurant
from modules.restaurants.repositories.restaurant_repository import (
    RestaurantRepository, SQLAlchemyRestaurantRepository
)
from ..models.reservation_models import Reservation
from ..repositories.reservation_repository import (
    ReservationRepository, SQLAlchemyReservationRepository
)
from ..schemas.reservation_schemas import ReservationCreate, ReservationUpdate
from .availability_service import CapacityCounter, OpeningHoursValidator

logger = logging.getLogger(__name__)


def _validation_message(error: pydantic.ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in error.errors()
    )


class ReservationAdmissionController:
    """Admits, modifies and removes reservations"""

    def __init__(
        self,
        db: Session,
        clock: Clock = system_clock,
        reservations: Optional[ReservationRepository] = None,
        restaurants: Optional[RestaurantRepository] = None,
        users: Optional[UserRepository] = None,
        lifecycle: Optional[NotificationLifecycleManager] = None,
        audit_logger: Optional[AdminAuditLogger] = None,
        config: Optional[Settings] = None,
    ):
        self.db = db
        self.clock = clock
        self.config = config or default_settings
        self.reservations = reservations or SQLAlchemyReservationRepository(db)
        self.restaurants = restaurants or SQLAlchemyRestaurantRepository(db)
        self.users = users or SQLAlchemyUserRepository(db)
        self.lifecycle = lifecycle or NotificationLifecycleManager(db, clock=clock)
        self.audit_logger = audit_logger or AdminAuditLogger(db)
        self.hours_validator = OpeningHoursValidator(clock)
        self.capacity_counter = CapacityCounter(self.reservations, clock)

    @property
    def min_gap(self) -> timedelta:
        return timedelta(minutes=self.config.min_reservation_gap_minutes)

    @property
    def modification_cutoff(self) -> timedelta:
        return timedelta(minutes=self.config.modification_cutoff_minutes)

    # Pipeline steps

    def _load_restaurant(self, restaurant_id: int) -> Restaurant:
        restaurant = self.restaurants.get(restaurant_id, for_update=True)
        if restaurant is None:
            raise NotFoundError(f"No restaurant with the id of {restaurant_id}")
        if not restaurant.verified:
            raise PreconditionError(f"Restaurant {restaurant_id} is not verified")
        return restaurant

    def _lock_owner(self, user_id: int) -> User:
        owner = self.users.get(user_id, for_update=True)
        if owner is None:
            raise NotFoundError(f"No user with the id of {user_id}")
        return owner

    def _local_date(self, instant: datetime, restaurant: Restaurant) -> date:
        return self.clock.to_local(instant, restaurant.timezone or "UTC").date()

    def _check_hours(self, restaurant: Restaurant, rev_date: datetime) -> None:
        if not self.hours_validator.is_within_hours(
            rev_date, restaurant.open_time, restaurant.close_time, restaurant.timezone or "UTC"
        ):
            raise ValidationError(
                f"Reservation time must be between {restaurant.open_time} and {restaurant.close_time}"
            )

    def _check_capacity(
        self,
        restaurant: Restaurant,
        rev_date: datetime,
        party_size: int,
        exclude_reservation_id: Optional[int] = None,
    ) -> None:
        reserved = self.capacity_counter.reserved_count(
            restaurant.id,
            rev_date,
            restaurant.timezone or "UTC",
            exclude_reservation_id=exclude_reservation_id,
        )
        if reserved + party_size > restaurant.max_reservation:
            raise CapacityError(
                remaining=max(restaurant.max_reservation - reserved, 0),
                day=self._local_date(rev_date, restaurant),
            )

    def _check_quota(
        self,
        user_id: int,
        restaurant: Restaurant,
        rev_date: datetime,
        exclude_reservation_id: Optional[int] = None,
    ) -> None:
        start, end = self.clock.local_day_bounds(rev_date, restaurant.timezone or "UTC")
        same_day = [
            r for r in self.reservations.find_by_user_between(user_id, start, end)
            if r.id != exclude_reservation_id
        ]
        limit = self.config.daily_reservation_limit
        if len(same_day) >= limit:
            raise QuotaError(day=self._local_date(rev_date, restaurant), limit=limit)

    def _check_gap(
        self,
        user_id: int,
        rev_date: datetime,
        exclude_reservation_id: Optional[int] = None,
    ) -> None:
        # Open window: a reservation exactly one gap away is allowed
        nearby = self.reservations.find_by_user_between(
            user_id, rev_date - self.min_gap, rev_date + self.min_gap
        )
        for other in nearby:
            if other.id == exclude_reservation_id:
                continue
            if abs(other.rev_date - rev_date) < self.min_gap:
                raise ConflictError()

    def _check_may_modify(self, reservation: Reservation, requesting_user: User) -> None:
        is_admin = requesting_user.role == UserRole.ADMIN
        if reservation.user_id != requesting_user.id and not is_admin:
            raise AuthorizationError(
                f"User {requesting_user.id} is not authorized to modify this reservation"
            )
        # Measured from the reservation's current time, not the requested one
        if not is_admin and reservation.rev_date - self.clock.now() <= self.modification_cutoff:
            raise TooLateError()

    def _audit(self, requesting_user_id: int, action: str, reservation_id: int) -> None:
        self.audit_logger.log_admin_action(requesting_user_id, action, "Reservation", reservation_id)

    def _reject(self, operation: str, error: ServiceError) -> ServiceResult:
        self.db.rollback()
        logger.info(f"Reservation {operation} rejected ({error.error_code}): {error.detail}")
        return ServiceResult.failure(error)

    def _fail(self, operation: str, error: Exception) -> ServiceResult:
        self.db.rollback()
        logger.exception(f"Error during reservation {operation}: {error}")
        return ServiceResult.failure(
            InternalError(str(error), public_message=f"Cannot {operation} reservation")
        )

    # Public operations

    async def admit_create(
        self,
        user_id: int,
        restaurant_id: int,
        requested_time: datetime,
        party_size: int,
        is_admin: bool = False,
    ) -> ServiceResult[Reservation]:
        """Create a reservation for ``user_id`` if every admission check passes"""
        try:
            try:
                data = ReservationCreate(rev_date=requested_time, number_of_people=party_size)
            except pydantic.ValidationError as e:
                raise ValidationError(_validation_message(e))

            rev_date = self.clock.to_utc(data.rev_date)
            if rev_date <= self.clock.now():
                raise ValidationError("Reservation date must be in the future")

            restaurant = self._load_restaurant(restaurant_id)
            self._lock_owner(user_id)

            self._check_hours(restaurant, rev_date)
            self._check_capacity(restaurant, rev_date, data.number_of_people)
            if not is_admin:
                self._check_quota(user_id, restaurant, rev_date)
            self._check_gap(user_id, rev_date)

            reservation = self.reservations.create(
                user_id=user_id,
                restaurant_id=restaurant.id,
                rev_date=rev_date,
                number_of_people=data.number_of_people,
            )
            self.lifecycle.schedule_reminder(reservation, restaurant)

            if is_admin:
                self._audit(user_id, "Create", reservation.id)

            self.db.commit()
            self.db.refresh(reservation)
        except ServiceError as e:
            return self._reject("create", e)
        except Exception as e:
            return self._fail("create", e)

        logger.info(
            f"Reservation {reservation.id} created for user {user_id} at restaurant {restaurant_id}"
        )
        return ServiceResult.success(reservation, status_code=status.HTTP_201_CREATED)

    async def admit_update(
        self,
        reservation_id: int,
        requested_changes: Union[ReservationUpdate, dict],
        requesting_user: User,
    ) -> ServiceResult[Reservation]:
        """
        Apply changes to the reservation's time and/or party size.

        The reservation's own party is left out of the capacity count only
        while it stays on the same calendar day; moved to another day, it
        does not yet occupy any of that day's capacity.
        """
        try:
            if isinstance(requested_changes, ReservationUpdate):
                changes = requested_changes
            else:
                try:
                    changes = ReservationUpdate.model_validate(requested_changes)
                except pydantic.ValidationError as e:
                    raise ValidationError(_validation_message(e))

            reservation = self.reservations.get(reservation_id)
            if reservation is None:
                raise NotFoundError(f"No reservation with the id of {reservation_id}")

            restaurant = self._load_restaurant(reservation.restaurant_id)
            self._lock_owner(reservation.user_id)

            rev_date = reservation.rev_date
            if changes.rev_date is not None:
                rev_date = self.clock.to_utc(changes.rev_date)
                if rev_date <= self.clock.now():
                    raise ValidationError("Reservation date must be in the future")
            party_size = changes.number_of_people or reservation.number_of_people

            same_day = self._local_date(rev_date, restaurant) == self._local_date(
                reservation.rev_date, restaurant
            )
            is_admin = requesting_user.role == UserRole.ADMIN

            self._check_hours(restaurant, rev_date)
            self._check_capacity(
                restaurant,
                rev_date,
                party_size,
                exclude_reservation_id=reservation.id if same_day else None,
            )
            if not is_admin:
                self._check_quota(
                    reservation.user_id, restaurant, rev_date, exclude_reservation_id=reservation.id
                )
            self._check_gap(reservation.user_id, rev_date, exclude_reservation_id=reservation.id)
            self._check_may_modify(reservation, requesting_user)

            reservation = self.reservations.update(
                reservation.id, {"rev_date": rev_date, "number_of_people": party_size}
            )
            self.lifecycle.reschedule_reminder(reservation, restaurant)

            if is_admin:
                self._audit(requesting_user.id, "Update", reservation.id)

            self.db.commit()
            self.db.refresh(reservation)
        except ServiceError as e:
            return self._reject("update", e)
        except Exception as e:
            return self._fail("update", e)

        logger.info(f"Reservation {reservation_id} updated by user {requesting_user.id}")
        return ServiceResult.success(reservation)

    async def admit_delete(
        self, reservation_id: int, requesting_user: User
    ) -> ServiceResult[None]:
        """Remove a reservation together with every notification addressed to it"""
        try:
            reservation = self.reservations.get(reservation_id)
            if reservation is None:
                raise NotFoundError(f"No reservation with the id of {reservation_id}")

            self._check_may_modify(reservation, requesting_user)

            self.lifecycle.cancel_reminders(reservation.id)
            self.reservations.delete(reservation.id)

            if requesting_user.role == UserRole.ADMIN:
                self._audit(requesting_user.id, "Delete", reservation_id)

            self.db.commit()
        except ServiceError as e:
            return self._reject("delete", e)
        except Exception as e:
            return self._fail("delete", e)

        logger.info(f"Reservation {reservation_id} deleted by user {requesting_user.id}")
        return ServiceResult.success(None)

    def remove_for_user(self, user_id: int) -> int:
        """
        Delete all of a user's reservations and every notification addressed to them.

        Runs inside the caller's transaction; used when the account itself
        is being removed.
        """
        reservations = self.reservations.find_by_user(user_id)
        for reservation in reservations:
            self.lifecycle.cancel_reminders(reservation.id)
        # Includes notices about reservations that are already gone
        self.lifecycle.cancel_for_recipient(user_id)
        deleted = self.reservations.delete_many(user_id=user_id)
        logger.info(f"Removed {deleted} reservations of user {user_id}")
        return deleted
