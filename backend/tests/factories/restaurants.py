# backend/tests/factories/restaurants.py

from factory import Sequence
from .base import BaseFactory
from modules.restaurants.models.restaurant_models import Restaurant


class RestaurantFactory(BaseFactory):
    """Verified restaurant open 09:00-22:00 UTC."""

    class Meta:
        model = Restaurant

    name = Sequence(lambda n: f"Restaurant {n}")
    province = "Bangkok"
    district = "Pathum Wan"
    address = "1 Rama I Rd"
    postalcode = "10330"
    tel = "021234567"
    img_path = "restaurants/default.jpg"
    open_time = "09:00"
    close_time = "22:00"
    timezone = "UTC"
    max_reservation = 20
    verified = True
