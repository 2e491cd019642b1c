# backend/modules/notifications/repositories/notification_repository.py

"""
Data access for notifications.

Visibility is expressed as a list of ``AudienceClause`` objects: a row is
visible when it satisfies every condition of at least one clause. The
SQLAlchemy implementation turns that into a single ``OR`` of ``AND``s.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple

from sqlalchemy import and_, false, or_
from sqlalchemy.orm import Session

from ..models.notification_models import Notification, NotificationKind
from ..schemas.notification_schemas import NotificationFilters


@dataclass(frozen=True)
class AudienceClause:
    """Conjunction of optional conditions; None means "no restriction"."""

    creator_ids: Optional[FrozenSet[int]] = None
    created_by: Optional[FrozenSet[str]] = None
    restaurant_ids: Optional[FrozenSet[int]] = None
    targets: Optional[FrozenSet[str]] = None
    recipient_ids: Optional[FrozenSet[int]] = None
    published_before: Optional[datetime] = None


class NotificationRepository(ABC):
    """Notification store"""

    @abstractmethod
    def get(self, notification_id: int) -> Optional[Notification]:
        ...

    @abstractmethod
    def find_visible(
        self,
        clauses: Optional[List[AudienceClause]],
        filters: NotificationFilters,
        offset: int,
        limit: int,
    ) -> Tuple[List[Notification], int]:
        ...

    @abstractmethod
    def find_by_target(
        self, target: str, kind: Optional[NotificationKind] = None
    ) -> List[Notification]:
        ...

    @abstractmethod
    def create(self, **values: Any) -> Notification:
        ...

    @abstractmethod
    def create_many(self, rows: Iterable[Dict[str, Any]]) -> List[Notification]:
        ...

    @abstractmethod
    def update(self, notification: Notification, values: Dict[str, Any]) -> Notification:
        ...

    @abstractmethod
    def delete(self, notification_id: int) -> None:
        ...

    @abstractmethod
    def delete_where(
        self,
        targets: Optional[Iterable[str]] = None,
        kind: Optional[NotificationKind] = None,
        creator_ids: Optional[Iterable[int]] = None,
        recipient_ids: Optional[Iterable[int]] = None,
    ) -> int:
        ...


class SQLAlchemyNotificationRepository(NotificationRepository):
    def __init__(self, db: Session):
        self.db = db

    def get(self, notification_id: int) -> Optional[Notification]:
        return (
            self.db.query(Notification)
            .filter(Notification.id == notification_id)
            .first()
        )

    def _clause_condition(self, clause: AudienceClause):
        conditions = []
        if clause.creator_ids is not None:
            if not clause.creator_ids:
                return false()
            conditions.append(Notification.creator_id.in_(clause.creator_ids))
        if clause.created_by is not None:
            conditions.append(Notification.created_by.in_(clause.created_by))
        if clause.restaurant_ids is not None:
            if not clause.restaurant_ids:
                return false()
            conditions.append(Notification.restaurant_id.in_(clause.restaurant_ids))
        if clause.targets is not None:
            if not clause.targets:
                return false()
            conditions.append(Notification.target_audience.in_(clause.targets))
        if clause.recipient_ids is not None:
            if not clause.recipient_ids:
                return false()
            conditions.append(Notification.recipient_id.in_(clause.recipient_ids))
        if clause.published_before is not None:
            conditions.append(Notification.publish_at <= clause.published_before)
        return and_(*conditions)

    def _order_by(self, filters: NotificationFilters):
        ordering = []
        for field in filters.sort_fields():
            column = getattr(Notification, field.lstrip("-"))
            ordering.append(column.desc() if field.startswith("-") else column.asc())
        # Stable pages for equal sort keys
        ordering.append(Notification.id.desc())
        return ordering

    def find_visible(
        self,
        clauses: Optional[List[AudienceClause]],
        filters: NotificationFilters,
        offset: int,
        limit: int,
    ) -> Tuple[List[Notification], int]:
        query = self.db.query(Notification)

        # Base audience predicate first
        if clauses is not None:
            if not clauses:
                return [], 0
            query = query.filter(or_(*[self._clause_condition(c) for c in clauses]))

        # Then the caller's field filters
        if filters.created_by is not None:
            query = query.filter(Notification.created_by == filters.created_by)
        if filters.target_audience is not None:
            query = query.filter(Notification.target_audience == filters.target_audience)
        if filters.kind is not None:
            query = query.filter(Notification.kind == filters.kind)
        if filters.restaurant_id is not None:
            query = query.filter(Notification.restaurant_id == filters.restaurant_id)

        total = query.order_by(None).count()
        items = (
            query.order_by(*self._order_by(filters))
            .offset(offset)
            .limit(limit)
            .all()
        )
        return items, total

    def find_by_target(
        self, target: str, kind: Optional[NotificationKind] = None
    ) -> List[Notification]:
        query = self.db.query(Notification).filter(Notification.target_audience == target)
        if kind is not None:
            query = query.filter(Notification.kind == kind)
        return query.order_by(Notification.id).all()

    def create(self, **values: Any) -> Notification:
        notification = Notification(**values)
        self.db.add(notification)
        self.db.flush()
        return notification

    def create_many(self, rows: Iterable[Dict[str, Any]]) -> List[Notification]:
        notifications = [Notification(**row) for row in rows]
        self.db.add_all(notifications)
        self.db.flush()
        return notifications

    def update(self, notification: Notification, values: Dict[str, Any]) -> Notification:
        for field, value in values.items():
            setattr(notification, field, value)
        self.db.flush()
        return notification

    def delete(self, notification_id: int) -> None:
        self.db.query(Notification).filter(Notification.id == notification_id).delete(
            synchronize_session=False
        )
        self.db.flush()

    def delete_where(
        self,
        targets: Optional[Iterable[str]] = None,
        kind: Optional[NotificationKind] = None,
        creator_ids: Optional[Iterable[int]] = None,
        recipient_ids: Optional[Iterable[int]] = None,
    ) -> int:
        if all(c is None for c in (targets, kind, creator_ids, recipient_ids)):
            raise ValueError("delete_where requires at least one condition")

        query = self.db.query(Notification)
        if targets is not None:
            targets = list(targets)
            if not targets:
                return 0
            query = query.filter(Notification.target_audience.in_(targets))
        if kind is not None:
            query = query.filter(Notification.kind == kind)
        if creator_ids is not None:
            creator_ids = list(creator_ids)
            if not creator_ids:
                return 0
            query = query.filter(Notification.creator_id.in_(creator_ids))
        if recipient_ids is not None:
            recipient_ids = list(recipient_ids)
            if not recipient_ids:
                return 0
            query = query.filter(Notification.recipient_id.in_(recipient_ids))

        deleted = query.delete(synchronize_session=False)
        self.db.flush()
        return deleted
