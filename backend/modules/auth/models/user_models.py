# backend/modules/auth/models/user_models.py

"""
User accounts and roles.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from core.database import Base
import enum


class UserRole(str, enum.Enum):
    """Roles recognised by the reservation backend"""

    ADMIN = "admin"
    RESTAURANT_MANAGER = "restaurantManager"
    CUSTOMER = "user"


class User(Base):
    """Platform user: administrator, restaurant manager or customer"""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    tel = Column(String(15))
    role = Column(
        Enum(UserRole, values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
        default=UserRole.CUSTOMER,
        index=True,
    )

    # Restaurant managers only
    verified = Column(Boolean)
    restaurant_id = Column(
        Integer, ForeignKey("restaurants.id", ondelete="SET NULL"), index=True
    )

    created_at = Column(DateTime, server_default=func.now())

    restaurant = relationship("Restaurant", back_populates="managers")
    reservations = relationship("Reservation", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_manager(self) -> bool:
        return self.role == UserRole.RESTAURANT_MANAGER

    @property
    def is_customer(self) -> bool:
        return self.role == UserRole.CUSTOMER

    def __repr__(self):
        return f"<User {self.id} {self.role}>"
