from .availability_service import CapacityCounter, OpeningHoursValidator
from .reservation_service import ReservationAdmissionController

__all__ = [
    "CapacityCounter",
    "OpeningHoursValidator",
    "ReservationAdmissionController",
]
