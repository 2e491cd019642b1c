# backend/tests/factories/utils.py

from datetime import datetime, timedelta
from typing import Dict

from .auth import UserFactory, ManagerFactory
from .restaurants import RestaurantFactory
from .reservations import ReservationFactory


def create_reservation_scenario(
    num_reservations: int = 1,
    first_rev_date: datetime = datetime(2030, 6, 2, 12, 0),
    spacing: timedelta = timedelta(hours=2),
    customer=None,
    **restaurant_kwargs,
) -> Dict:
    """
    Create a restaurant with its manager and a customer holding reservations there.

    Args:
        num_reservations: Number of reservations to create for the customer
        first_rev_date: Time of the first reservation (naive UTC)
        spacing: Interval between consecutive reservations
        customer: Customer to book for (creates one if not provided)
        **restaurant_kwargs: Overrides for the restaurant

    Returns:
        Dict containing all created objects
    """
    restaurant = RestaurantFactory(**restaurant_kwargs)
    manager = ManagerFactory(restaurant=restaurant)
    customer = customer or UserFactory()

    reservations = [
        ReservationFactory(
            user=customer,
            restaurant=restaurant,
            rev_date=first_rev_date + i * spacing,
        )
        for i in range(num_reservations)
    ]

    return {
        "restaurant": restaurant,
        "manager": manager,
        "customer": customer,
        "reservations": reservations,
    }
