# backend/tests/factories/__init__.py

"""
Shared test factories for the reservation backend.
"""

from .base import BaseFactory, bind_session
from .auth import UserFactory, AdminFactory, ManagerFactory
from .restaurants import RestaurantFactory
from .reservations import ReservationFactory
from .notifications import NotificationFactory
from .utils import create_reservation_scenario

__all__ = [
    # Base
    'BaseFactory',
    'bind_session',

    # Users
    'UserFactory',
    'AdminFactory',
    'ManagerFactory',

    # Restaurants and reservations
    'RestaurantFactory',
    'ReservationFactory',

    # Notifications
    'NotificationFactory',

    # Utils
    'create_reservation_scenario',
]
