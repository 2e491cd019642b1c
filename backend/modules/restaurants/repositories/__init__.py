from .restaurant_repository import RestaurantRepository, SQLAlchemyRestaurantRepository

__all__ = ["RestaurantRepository", "SQLAlchemyRestaurantRepository"]
