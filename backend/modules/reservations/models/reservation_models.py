# backend/modules/reservations/models/reservation_models.py

"""
Reservation model.
"""

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from core.database import Base


class Reservation(Base):
    """A user's booking of a party at a restaurant for a given instant"""

    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    restaurant_id = Column(
        Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False
    )

    # Reservation details (rev_date is a naive UTC instant)
    rev_date = Column(DateTime, nullable=False, index=True)
    number_of_people = Column(Integer, nullable=False, default=1)

    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    user = relationship("User", back_populates="reservations")
    restaurant = relationship("Restaurant", back_populates="reservations")

    # Indexes for capacity and quota lookups
    __table_args__ = (
        Index("idx_reservation_restaurant_date", "restaurant_id", "rev_date"),
        Index("idx_reservation_user_date", "user_id", "rev_date"),
        CheckConstraint("number_of_people >= 1", name="ck_reservation_party_size"),
        # Reservation ids are never reused; notifications address them by id
        {"sqlite_autoincrement": True},
    )

    def __repr__(self):
        return f"<Reservation {self.id} - user {self.user_id} at {self.restaurant_id} on {self.rev_date}>"
