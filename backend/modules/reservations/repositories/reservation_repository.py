# backend/modules/reservations/repositories/reservation_repository.py

"""
Data access for reservations.

Write methods flush but never commit; the service that owns the admission
transaction decides when to commit or roll back.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..models.reservation_models import Reservation


class ReservationRepository(ABC):
    """Reservation store used by admission control and audience resolution"""

    @abstractmethod
    def get(self, reservation_id: int) -> Optional[Reservation]:
        ...

    @abstractmethod
    def find_by_user(self, user_id: int) -> List[Reservation]:
        ...

    @abstractmethod
    def find_by_user_between(
        self, user_id: int, start: datetime, end: datetime
    ) -> List[Reservation]:
        ...

    @abstractmethod
    def find_by_restaurant(self, restaurant_id: int) -> List[Reservation]:
        ...

    @abstractmethod
    def sum_party_size(
        self,
        restaurant_id: int,
        start: datetime,
        end: datetime,
        exclude_reservation_id: Optional[int] = None,
    ) -> int:
        ...

    @abstractmethod
    def create(self, **values: Any) -> Reservation:
        ...

    @abstractmethod
    def update(self, reservation_id: int, values: Dict[str, Any]) -> Reservation:
        ...

    @abstractmethod
    def delete(self, reservation_id: int) -> None:
        ...

    @abstractmethod
    def delete_many(
        self, restaurant_id: Optional[int] = None, user_id: Optional[int] = None
    ) -> int:
        ...


class SQLAlchemyReservationRepository(ReservationRepository):
    def __init__(self, db: Session):
        self.db = db

    def get(self, reservation_id: int) -> Optional[Reservation]:
        return self.db.query(Reservation).filter(Reservation.id == reservation_id).first()

    def find_by_user(self, user_id: int) -> List[Reservation]:
        return (
            self.db.query(Reservation)
            .filter(Reservation.user_id == user_id)
            .order_by(Reservation.rev_date.desc())
            .all()
        )

    def find_by_user_between(
        self, user_id: int, start: datetime, end: datetime
    ) -> List[Reservation]:
        return (
            self.db.query(Reservation)
            .filter(
                Reservation.user_id == user_id,
                Reservation.rev_date >= start,
                Reservation.rev_date < end,
            )
            .all()
        )

    def find_by_restaurant(self, restaurant_id: int) -> List[Reservation]:
        return (
            self.db.query(Reservation)
            .filter(Reservation.restaurant_id == restaurant_id)
            .all()
        )

    def sum_party_size(
        self,
        restaurant_id: int,
        start: datetime,
        end: datetime,
        exclude_reservation_id: Optional[int] = None,
    ) -> int:
        query = self.db.query(
            func.coalesce(func.sum(Reservation.number_of_people), 0)
        ).filter(
            Reservation.restaurant_id == restaurant_id,
            Reservation.rev_date >= start,
            Reservation.rev_date < end,
        )

        if exclude_reservation_id is not None:
            query = query.filter(Reservation.id != exclude_reservation_id)

        return int(query.scalar() or 0)

    def create(self, **values: Any) -> Reservation:
        reservation = Reservation(**values)
        self.db.add(reservation)
        self.db.flush()
        return reservation

    def update(self, reservation_id: int, values: Dict[str, Any]) -> Reservation:
        reservation = self.get(reservation_id)
        for field, value in values.items():
            setattr(reservation, field, value)
        self.db.flush()
        return reservation

    def delete(self, reservation_id: int) -> None:
        self.db.query(Reservation).filter(Reservation.id == reservation_id).delete(
            synchronize_session=False
        )
        self.db.flush()

    def delete_many(
        self, restaurant_id: Optional[int] = None, user_id: Optional[int] = None
    ) -> int:
        query = self.db.query(Reservation)
        if restaurant_id is not None:
            query = query.filter(Reservation.restaurant_id == restaurant_id)
        if user_id is not None:
            query = query.filter(Reservation.user_id == user_id)
        deleted = query.delete(synchronize_session=False)
        self.db.flush()
        return deleted
