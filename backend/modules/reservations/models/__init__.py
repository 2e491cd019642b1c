from .reservation_models import Reservation

__all__ = ["Reservation"]
