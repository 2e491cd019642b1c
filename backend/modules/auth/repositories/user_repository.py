# backend/modules/auth/repositories/user_repository.py

"""
Data access for user accounts.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from ..models.user_models import User, UserRole


class UserRepository(ABC):
    """User lookups needed by the reservation and notification services"""

    @abstractmethod
    def get(self, user_id: int, for_update: bool = False) -> Optional[User]:
        ...

    @abstractmethod
    def find_managers(self, restaurant_ids: Iterable[int]) -> List[User]:
        ...

    @abstractmethod
    def delete(self, user_id: int) -> None:
        ...

    @abstractmethod
    def delete_managers_of(self, restaurant_id: int) -> List[int]:
        ...


class SQLAlchemyUserRepository(UserRepository):
    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: int, for_update: bool = False) -> Optional[User]:
        query = self.db.query(User).filter(User.id == user_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def find_managers(self, restaurant_ids: Iterable[int]) -> List[User]:
        restaurant_ids = list(restaurant_ids)
        if not restaurant_ids:
            return []
        return (
            self.db.query(User)
            .filter(
                User.role == UserRole.RESTAURANT_MANAGER,
                User.restaurant_id.in_(restaurant_ids),
            )
            .all()
        )

    def delete(self, user_id: int) -> None:
        self.db.query(User).filter(User.id == user_id).delete(synchronize_session=False)
        self.db.flush()

    def delete_managers_of(self, restaurant_id: int) -> List[int]:
        managers = self.find_managers([restaurant_id])
        manager_ids = [m.id for m in managers]
        if manager_ids:
            self.db.query(User).filter(User.id.in_(manager_ids)).delete(
                synchronize_session=False
            )
            self.db.flush()
        return manager_ids
