from .user_repository import UserRepository, SQLAlchemyUserRepository

__all__ = ["UserRepository", "SQLAlchemyUserRepository"]
