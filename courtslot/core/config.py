# courtslot/core/config.py
import logging
import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"
    logger.debug(f"[CONFIG] Looking for .env at: {env_path} (exists: {env_path.exists()})")
    load_dotenv(env_path)


class Settings(BaseSettings):
    environment: str = Field(
        default="development",
        alias="ENVIRONMENT",
        description="Deployment environment name",
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL", description="Root log level")

    # Database
    database_url: str = Field(
        default="sqlite:///./courtslot.db",
        alias="DATABASE_URL",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = Field(
        default=False,
        alias="DATABASE_ECHO",
        description="Echo SQL statements to the log",
    )

    # Calendar
    facility_timezone: str = Field(
        default="UTC",
        alias="FACILITY_TIMEZONE",
        description="IANA timezone used to interpret calendar view anchors",
    )

    # Pagination
    default_page_size: int = Field(default=20, alias="DEFAULT_PAGE_SIZE", ge=1)
    max_page_size: int = Field(default=100, alias="MAX_PAGE_SIZE", ge=1)

    # Booking rules
    enforce_slot_conflicts: bool = Field(
        default=False,
        alias="ENFORCE_SLOT_CONFLICTS",
        description="Reject bookings whose slots overlap active slots on the same court",
    )

    # Analytics
    operating_hours_per_day: int = Field(
        default=18,
        alias="OPERATING_HOURS_PER_DAY",
        ge=1,
        le=24,
        description="Bookable hours per court per day, used for utilization rates",
    )
    analytics_first_hour: int = Field(
        default=6,
        alias="ANALYTICS_FIRST_HOUR",
        ge=0,
        le=23,
        description="First hour of day reported by popular-slot analytics",
    )

    # Monitoring
    slow_operation_seconds: float = Field(
        default=1.0,
        alias="SLOW_OPERATION_SECONDS",
        description="Service operations slower than this are logged as warnings",
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("facility_timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone: {value}") from exc
        return value

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.facility_timezone)


settings = Settings()
