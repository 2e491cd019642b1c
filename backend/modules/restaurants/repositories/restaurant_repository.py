# backend/modules/restaurants/repositories/restaurant_repository.py

from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy.orm import Session

from ..models.restaurant_models import Restaurant


class RestaurantRepository(ABC):
    """Restaurant lookups used by admission control"""

    @abstractmethod
    def get(self, restaurant_id: int, for_update: bool = False) -> Optional[Restaurant]:
        ...

    @abstractmethod
    def delete(self, restaurant_id: int) -> None:
        ...


class SQLAlchemyRestaurantRepository(RestaurantRepository):
    def __init__(self, db: Session):
        self.db = db

    def get(self, restaurant_id: int, for_update: bool = False) -> Optional[Restaurant]:
        query = self.db.query(Restaurant).filter(Restaurant.id == restaurant_id)
        if for_update:
            # Serialises concurrent admissions against the same restaurant
            query = query.with_for_update()
        return query.first()

    def delete(self, restaurant_id: int) -> None:
        self.db.query(Restaurant).filter(Restaurant.id == restaurant_id).delete(
            synchronize_session=False
        )
        self.db.flush()
