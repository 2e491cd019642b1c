# backend/modules/restaurants/models/restaurant_models.py

"""
Restaurant listings with operating hours and daily reservation capacity.
"""

import re

from sqlalchemy import (
    Column, Integer, String, DateTime, Boolean, Text, CheckConstraint
)
from sqlalchemy.orm import relationship, validates
from sqlalchemy.sql import func
from core.config import settings
from core.database import Base

HHMM_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class Restaurant(Base):
    """Restaurant that accepts reservations once verified"""

    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    description = Column(Text)
    food_type = Column(String(50))
    address = Column(String(255))
    province = Column(String(100))
    district = Column(String(100))
    postalcode = Column(String(5))
    tel = Column(String(15))
    img_path = Column(String(500))

    # Operating hours as "HH:MM" in the restaurant's timezone
    open_time = Column(String(5), nullable=False)
    close_time = Column(String(5), nullable=False)
    timezone = Column(String(64), nullable=False, default=lambda: settings.default_restaurant_timezone)

    # Capacity ceiling per calendar day (sum of party sizes)
    max_reservation = Column(Integer, nullable=False, default=0)
    verified = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, server_default=func.now())

    managers = relationship("User", back_populates="restaurant")
    reservations = relationship("Reservation", back_populates="restaurant")

    __table_args__ = (
        CheckConstraint("max_reservation >= 0", name="ck_restaurant_max_reservation"),
        CheckConstraint("close_time > open_time", name="ck_restaurant_hours_order"),
    )

    @validates("open_time", "close_time")
    def validate_hours(self, key, value):
        """Hours must be HH:MM and closing must come after opening"""
        if value is None or not HHMM_PATTERN.match(value):
            raise ValueError(f"{key} must be in the format hh:mm")

        other = self.close_time if key == "open_time" else self.open_time
        if other is not None:
            open_value, close_value = (value, other) if key == "open_time" else (other, value)
            # Zero-padded HH:MM strings order the same way as the times they encode
            if close_value <= open_value:
                raise ValueError("Closing time must be after opening time")
        return value

    @validates("max_reservation")
    def validate_max_reservation(self, key, value):
        if value is not None and value < 0:
            raise ValueError("Max reservation must be greater than or equal to 0")
        return value

    def preview(self) -> dict:
        """Fields shown alongside a manager's notifications"""
        return {
            "id": self.id,
            "name": self.name,
            "tel": self.tel,
            "province": self.province,
            "img_path": self.img_path,
        }

    def __repr__(self):
        return f"<Restaurant {self.id} {self.name}>"
