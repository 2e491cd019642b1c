"""
Configuration management for the reservation backend.

Values are read from environment variables (or a local ``.env`` file) so the
admission rules and notification paging can be tuned per deployment.
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings with environment variable support.
    """

    # Database Configuration
    database_url: str = "sqlite:///./reservations.db"
    log_sql_queries: bool = False
    slow_query_threshold_seconds: float = 1.0

    # Environment Settings
    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # Time handling
    default_restaurant_timezone: str = "UTC"

    # Admission rules
    daily_reservation_limit: int = 3
    min_reservation_gap_minutes: int = 60
    modification_cutoff_minutes: int = 60

    # Notifications
    reminder_lead_hours: int = 24
    notification_page_size: int = 25
    notification_max_page_size: int = 100

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lower-case level names from the environment."""
        return v.upper()

    @field_validator(
        "daily_reservation_limit",
        "min_reservation_gap_minutes",
        "modification_cutoff_minutes",
        "reminder_lead_hours",
    )
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Admission and reminder limits cannot be negative")
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment.lower() == "development"


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Returns:
        Settings instance with environment variables loaded
    """
    return Settings()


# Export settings instance for easy import
settings = get_settings()
