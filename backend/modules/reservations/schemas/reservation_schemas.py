# backend/modules/reservations/schemas/reservation_schemas.py

"""
Pydantic schemas for reservation admission requests.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional


class ReservationCreate(BaseModel):
    """Schema for creating a new reservation"""

    rev_date: datetime
    number_of_people: int = Field(1, ge=1)


class ReservationUpdate(BaseModel):
    """Requested changes; omitted fields keep their stored values"""

    rev_date: Optional[datetime] = None
    number_of_people: Optional[int] = Field(None, ge=1)

