"""
Audit logging for administrator actions.

Entries are appended to the ``admin_logs`` table and mirrored to the
``audit`` logger. Writing an entry is best-effort: a failure is logged and
never propagates into the operation being audited.
"""

import json
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, DateTime, Index
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .database import Base

logger = logging.getLogger(__name__)
audit_file_logger = logging.getLogger("audit")


class AdminLog(Base):
    """Append-only record of an administrator action."""

    __tablename__ = "admin_logs"

    id = Column(Integer, primary_key=True, index=True)
    admin_id = Column(Integer, nullable=False, index=True)
    action = Column(String(50), nullable=False)
    resource = Column(String(50), nullable=False)
    resource_id = Column(Integer, nullable=True)
    timestamp = Column(DateTime, default=datetime.utcnow, index=True)

    __table_args__ = (
        Index("idx_admin_log_resource", "resource", "resource_id"),
    )

    def __repr__(self):
        return f"<AdminLog {self.admin_id} {self.action} {self.resource}:{self.resource_id}>"


class AdminAuditLogger:
    """Writes AdminLog entries inside a savepoint of the caller's session."""

    def __init__(self, db: Session):
        self.db = db

    def log_admin_action(
        self,
        admin_id: int,
        action: str,
        resource: str,
        resource_id: Optional[int] = None,
    ) -> Optional[AdminLog]:
        entry = {
            "timestamp": datetime.utcnow().isoformat(),
            "admin_id": admin_id,
            "action": action,
            "resource": resource,
            "resource_id": resource_id,
        }
        audit_file_logger.info(f"ADMIN_ACTION: {json.dumps(entry)}")

        try:
            with self.db.begin_nested():
                log = AdminLog(
                    admin_id=admin_id,
                    action=action,
                    resource=resource,
                    resource_id=resource_id,
                )
                self.db.add(log)
            return log
        except SQLAlchemyError as e:
            logger.error(f"Failed to log admin action {action} on {resource} {resource_id}: {e}")
            return None
