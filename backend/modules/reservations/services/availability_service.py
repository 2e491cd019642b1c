# backend/modules/reservations/services/availability_service.py

"""
Opening-hours validation and daily capacity counting.
"""

from datetime import datetime, time
from typing import Optional
import logging

from core.clock import Clock, system_clock
from core.exceptions import ConfigurationError
from modules.restaurants.models.restaurant_models import HHMM_PATTERN
from ..repositories.reservation_repository import ReservationRepository

logger = logging.getLogger(__name__)


def parse_hhmm(value: Optional[str]) -> time:
    """Parse an "HH:MM" operating-hours bound"""
    if not value:
        raise ConfigurationError("The opening hours are not defined")

    match = HHMM_PATTERN.match(value.strip())
    if not match:
        raise ConfigurationError(f"Opening hours '{value}' must be in the format hh:mm")

    return time(int(match.group(1)), int(match.group(2)))


class OpeningHoursValidator:
    """Checks reservation instants against a restaurant's daily hours"""

    def __init__(self, clock: Clock = system_clock):
        self.clock = clock

    def is_within_hours(
        self,
        candidate: datetime,
        open_time: Optional[str],
        close_time: Optional[str],
        tz_name: str = "UTC",
    ) -> bool:
        """
        Compare only the hour:minute of the candidate, as seen on the
        restaurant's wall clock, against [open_time, close_time].

        Both bounds are inclusive and the date portion is ignored.
        Raises ConfigurationError when a bound is missing or malformed.
        """
        opens = parse_hhmm(open_time)
        closes = parse_hhmm(close_time)
        candidate_time = self.clock.local_time_of_day(candidate, tz_name)

        return opens <= candidate_time <= closes


class CapacityCounter:
    """Aggregates people already booked at a restaurant for a calendar day"""

    def __init__(self, reservations: ReservationRepository, clock: Clock = system_clock):
        self.reservations = reservations
        self.clock = clock

    def reserved_count(
        self,
        restaurant_id: int,
        day: datetime,
        tz_name: str = "UTC",
        exclude_reservation_id: Optional[int] = None,
    ) -> int:
        """
        Sum number_of_people over the restaurant's reservations whose
        rev_date falls in the restaurant-local calendar day containing ``day``.

        ``exclude_reservation_id`` leaves one reservation out of the sum; the
        admission controller passes it when an update stays on the same day.
        """
        start, end = self.clock.local_day_bounds(day, tz_name)
        total = self.reservations.sum_party_size(
            restaurant_id, start, end, exclude_reservation_id=exclude_reservation_id
        )
        logger.debug(
            f"Restaurant {restaurant_id} has {total} people reserved between {start} and {end}"
        )
        return total
