# backend/modules/notifications/tests/test_audience.py

import pytest

from modules.notifications.audience import (
    ALL,
    CUSTOMERS,
    RESTAURANT_MANAGERS,
    AudienceGroup,
    Broadcast,
    ReservationTarget,
    parse_target_audience,
)
from modules.notifications.models.notification_models import Notification


class TestParseTargetAudience:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Customers", CUSTOMERS),
            ("RestaurantManagers", RESTAURANT_MANAGERS),
            ("All", ALL),
            (AudienceGroup.ALL, ALL),
            (42, ReservationTarget(42)),
            ("42", ReservationTarget(42)),
            (ReservationTarget(7), ReservationTarget(7)),
        ],
    )
    def test_valid_values(self, raw, expected):
        assert parse_target_audience(raw) == expected

    @pytest.mark.parametrize("raw", ["customers", "Everyone", "", "-3", "4.5", 0, True, None, 1.5])
    def test_invalid_values(self, raw):
        with pytest.raises(ValueError):
            parse_target_audience(raw)

    def test_storage_form(self):
        assert Broadcast(AudienceGroup.CUSTOMERS).to_storage() == "Customers"
        assert ReservationTarget(15).to_storage() == "15"


class TestNotificationTarget:
    def test_variant_decided_on_assignment(self):
        notification = Notification(title="t", message="m", target_audience=15)

        assert notification.target_audience == "15"
        assert notification.target == ReservationTarget(15)

    def test_group_variant(self):
        notification = Notification(title="t", message="m", target_audience="RestaurantManagers")

        assert notification.target == RESTAURANT_MANAGERS

    def test_invalid_target_rejected(self):
        with pytest.raises(ValueError):
            Notification(title="t", message="m", target_audience="Staff")
