# backend/tests/factories/reservations.py

from datetime import datetime

import factory
from .base import BaseFactory
from .auth import UserFactory
from .restaurants import RestaurantFactory
from modules.reservations.models.reservation_models import Reservation


class ReservationFactory(BaseFactory):
    class Meta:
        model = Reservation

    user = factory.SubFactory(UserFactory)
    restaurant = factory.SubFactory(RestaurantFactory)
    rev_date = datetime(2030, 6, 2, 19, 0)
    number_of_people = 2
