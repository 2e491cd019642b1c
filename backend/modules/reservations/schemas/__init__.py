from .reservation_schemas import ReservationCreate, ReservationUpdate

__all__ = ["ReservationCreate", "ReservationUpdate"]
