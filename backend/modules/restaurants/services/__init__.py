from .restaurant_service import RestaurantService

__all__ = ["RestaurantService"]
