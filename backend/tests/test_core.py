# backend/tests/test_core.py

"""
Tests for the shared core: settings, errors, clock, audit and query logging.
"""

import logging
from datetime import date, datetime, time, timezone
from unittest.mock import patch

import pydantic
import pytest
from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError

from core.audit_logger import AdminAuditLogger, AdminLog
from core.clock import Clock, FixedClock, get_zone, to_utc
from core.config import Settings
from core.exceptions import (
    CapacityError,
    ConfigurationError,
    InternalError,
    NotFoundError,
    ServiceResult,
    ValidationError,
)
from core.logging_config import configure_logging
from core.query_logger import QueryLogger


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.daily_reservation_limit == 3
        assert settings.min_reservation_gap_minutes == 60
        assert settings.reminder_lead_hours == 24
        assert settings.default_restaurant_timezone == "UTC"

    def test_log_level_normalised(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_negative_limits_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            Settings(_env_file=None, daily_reservation_limit=-1)

    def test_environment_flags(self):
        settings = Settings(_env_file=None, environment="Production")

        assert settings.is_production
        assert not settings.is_development


class TestErrors:
    def test_http_mapping(self):
        exc = NotFoundError("No restaurant with the id of 3").to_http_exception()

        assert isinstance(exc, HTTPException)
        assert exc.status_code == 404
        assert exc.detail == {
            "success": False,
            "error_code": "NOT_FOUND",
            "msg": "No restaurant with the id of 3",
        }

    def test_configuration_error_is_validation_error(self):
        assert isinstance(ConfigurationError(), ValidationError)
        assert ConfigurationError().detail == "The opening hours are not defined"

    def test_capacity_error_message(self):
        error = CapacityError(remaining=2, day=date(2025, 6, 1))

        assert error.detail == "Not enough reservation slots available. Only 2 slots left for 2025-06-01"
        assert error.status_code == 400

    def test_internal_error_hidden_in_production(self):
        error = InternalError("duplicate key value", public_message="Cannot fetch notifications")

        assert error.to_http_exception(production=True).detail["msg"] == "Cannot fetch notifications"
        assert error.to_http_exception(production=False).detail["msg"] == "duplicate key value"

    def test_result_unwrap(self):
        assert ServiceResult.success(5).unwrap() == 5
        with pytest.raises(NotFoundError):
            ServiceResult.failure(NotFoundError()).unwrap()


class TestClock:
    def test_to_utc(self):
        aware = datetime(2025, 6, 1, 19, 0, tzinfo=get_zone("Asia/Bangkok"))

        assert to_utc(aware) == datetime(2025, 6, 1, 12, 0)
        assert to_utc(datetime(2025, 6, 1, 12, 0)) == datetime(2025, 6, 1, 12, 0)

    def test_now_is_naive_utc(self):
        now = Clock().now()

        assert now.tzinfo is None
        assert abs(now - datetime.now(timezone.utc).replace(tzinfo=None)).total_seconds() < 5

    def test_local_time_of_day(self):
        assert Clock().local_time_of_day(datetime(2025, 6, 1, 12, 30, 45), "Asia/Bangkok") == time(19, 30)

    def test_local_day_bounds(self):
        start, end = Clock().local_day_bounds(datetime(2025, 6, 1, 20, 0), "Asia/Bangkok")

        assert start == datetime(2025, 6, 1, 17, 0)
        assert end == datetime(2025, 6, 2, 17, 0)

    def test_local_day_bounds_across_dst(self):
        # Clocks go forward in New York on 2025-03-09: the local day lasts 23 hours
        start, end = Clock().local_day_bounds(datetime(2025, 3, 9, 12, 0), "America/New_York")

        assert start == datetime(2025, 3, 9, 5, 0)
        assert end == datetime(2025, 3, 10, 4, 0)

    def test_fixed_clock_advance(self):
        clock = FixedClock(datetime(2025, 6, 1, 8, 0))

        assert clock.advance(hours=2) == datetime(2025, 6, 1, 10, 0)
        assert clock.now() == datetime(2025, 6, 1, 10, 0)


class TestAdminAuditLogger:
    def test_writes_entry(self, db_session):
        entry = AdminAuditLogger(db_session).log_admin_action(1, "Delete", "Restaurant", 7)
        db_session.commit()

        assert entry is not None
        stored = db_session.query(AdminLog).one()
        assert (stored.admin_id, stored.action, stored.resource, stored.resource_id) == (
            1, "Delete", "Restaurant", 7
        )

    def test_failure_is_logged_not_raised(self, db_session, caplog):
        with patch.object(db_session, "begin_nested", side_effect=SQLAlchemyError("disk full")):
            with caplog.at_level(logging.ERROR, logger="core.audit_logger"):
                entry = AdminAuditLogger(db_session).log_admin_action(1, "Delete", "User", 2)

        assert entry is None
        assert "Failed to log admin action" in caplog.text


class TestQueryLogger:
    def test_counts_slow_queries(self, caplog):
        query_logger = QueryLogger()
        query_logger.slow_query_threshold = 0.5

        with caplog.at_level(logging.WARNING, logger="query_performance"):
            query_logger.record("SELECT 1", 0.1)
            query_logger.record("SELECT * FROM reservations", 0.9)

        assert query_logger.query_stats["total_queries"] == 2
        assert query_logger.query_stats["slow_queries"] == 1
        assert "SLOW QUERY" in caplog.text

        query_logger.reset_stats()
        assert query_logger.query_stats["total_queries"] == 0


def test_configure_logging():
    with patch("core.logging_config.logging.basicConfig") as basic_config:
        configure_logging("debug")

    assert basic_config.call_args.kwargs["level"] == logging.DEBUG


def test_get_db_yields_and_closes_session():
    from sqlalchemy.orm import Session
    from core.database import get_db

    sessions = get_db()
    db = next(sessions)

    assert isinstance(db, Session)
    sessions.close()
