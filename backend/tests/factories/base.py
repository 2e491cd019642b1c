# backend/tests/factories/base.py

from typing import Optional

from factory.alchemy import SQLAlchemyModelFactory
from sqlalchemy.orm import Session

_session: Optional[Session] = None


def bind_session(session: Optional[Session]) -> None:
    """Point every factory at the session of the running test."""
    global _session
    _session = session


def current_session() -> Session:
    if _session is None:
        raise RuntimeError("No database session bound; use the db_session fixture")
    return _session


class BaseFactory(SQLAlchemyModelFactory):
    """Base factory with session management for all test factories."""

    class Meta:
        abstract = True
        sqlalchemy_session_factory = current_session
        sqlalchemy_session_persistence = "commit"
