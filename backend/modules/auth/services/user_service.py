# backend/modules/auth/services/user_service.py

"""
Account removal.
"""

from typing import Optional
import logging

from sqlalchemy.orm import Session

from core.audit_logger import AdminAuditLogger
from core.clock import Clock, system_clock
from core.exceptions import (
    AuthorizationError, InternalError, NotFoundError, ServiceError, ServiceResult
)
from modules.reservations.services.reservation_service import ReservationAdmissionController
from ..models.user_models import User, UserRole
from ..repositories.user_repository import SQLAlchemyUserRepository, UserRepository

logger = logging.getLogger(__name__)


class UserService:
    def __init__(
        self,
        db: Session,
        clock: Clock = system_clock,
        users: Optional[UserRepository] = None,
        admission: Optional[ReservationAdmissionController] = None,
        audit_logger: Optional[AdminAuditLogger] = None,
    ):
        self.db = db
        self.users = users or SQLAlchemyUserRepository(db)
        self.admission = admission or ReservationAdmissionController(db, clock=clock)
        self.audit_logger = audit_logger or AdminAuditLogger(db)

    async def delete_user(self, user_id: int, requesting_user: User) -> ServiceResult[None]:
        """Delete an account and its reservations; users may delete themselves, admins anyone"""
        requester_id = requesting_user.id
        try:
            user = self.users.get(user_id, for_update=True)
            if user is None:
                raise NotFoundError(f"No user with the id of {user_id}")

            is_admin = requesting_user.role == UserRole.ADMIN
            if requester_id != user_id and not is_admin:
                raise AuthorizationError("Not authorized to delete this account")

            self.admission.remove_for_user(user_id)
            self.users.delete(user_id)

            if is_admin:
                self.audit_logger.log_admin_action(requester_id, "Delete", "User", user_id)

            self.db.commit()
        except ServiceError as e:
            self.db.rollback()
            logger.info(f"Account deletion refused: {e.detail}")
            return ServiceResult.failure(e)
        except Exception as e:
            self.db.rollback()
            logger.exception(f"Error deleting user {user_id}: {e}")
            return ServiceResult.failure(
                InternalError(str(e), public_message="Cannot delete user")
            )

        logger.info(f"User {user_id} deleted by user {requester_id}")
        return ServiceResult.success(None)
