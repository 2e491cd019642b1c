from .restaurant_models import Restaurant

__all__ = ["Restaurant"]
