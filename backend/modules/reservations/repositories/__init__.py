from .reservation_repository import ReservationRepository, SQLAlchemyReservationRepository

__all__ = ["ReservationRepository", "SQLAlchemyReservationRepository"]
