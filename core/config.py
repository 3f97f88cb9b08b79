"""
Configuration management with environment variable support and validation.

Design principles:
- Environment-specific configs (dev, staging, prod)
- Validation at startup (fail fast)
- Type safety with Pydantic
- Logging wired once, from the same config object
"""

import logging
import os
import sys
from functools import lru_cache
from pathlib import Path
from typing import Literal, cast

import structlog
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
Environment = Literal["development", "staging", "production"]


class TrackerConfig(BaseModel):
    """Behaviour of the cycle statistics and reminder queue."""

    default_cycle_length: int = Field(
        default=28, gt=0, le=120, description="Cycle length assumed before two cycles exist"
    )
    reminder_list_limit: int = Field(
        default=10, gt=0, description="Maximum reminders returned by a listing"
    )


class StorageConfig(BaseModel):
    """Where the CSV snapshot lives."""

    data_dir: Path = Field(default=Path("."), description="Directory holding the CSV files")
    cycles_file: str = Field(default="cycles.csv", description="Cycle records file name")
    logs_file: str = Field(default="daily_logs.csv", description="Daily log file name")

    @field_validator("cycles_file", "logs_file")
    def validate_file_name(cls, v: str) -> str:
        if not v or Path(v).name != v:
            raise ValueError("file name must be a bare name without directories")
        return v

    @property
    def cycles_path(self) -> Path:
        return self.data_dir / self.cycles_file

    @property
    def logs_path(self) -> Path:
        return self.data_dir / self.logs_file


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(default="WARNING", description="Logging level")
    format: Literal["json", "console"] = Field(default="json", description="Logging format")


class AppConfig(BaseModel):
    """Main application configuration combining all subsystems."""

    # Environment
    environment: Environment = Field(default="development", description="Environment")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Component configs
    tracker: TrackerConfig = Field(default_factory=TrackerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @model_validator(mode="after")
    def debug_only_in_dev(self) -> "AppConfig":
        """Ensure debug mode is only allowed in development environment."""
        if self.debug and self.environment != "development":
            raise ValueError("debug mode is only allowed in development environment")
        return self


def load_config_from_env() -> AppConfig:
    """Load configuration from environment variables with validation."""

    def _env_to_literal(val: str) -> Environment:
        v = val.strip().lower()
        if v in {"dev", "development"}:
            return "development"
        if v in {"stage", "staging"}:
            return "staging"
        return "production"

    def _level_to_literal(val: str) -> LogLevel:
        v = val.strip().upper()
        return cast(
            LogLevel, v if v in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"} else "WARNING"
        )

    def _env_flag(val: str) -> bool:
        return val.strip().lower() in {"1", "true", "yes", "on"}

    # Detect environment; debug must be switched on explicitly
    environment = _env_to_literal(os.getenv("ENVIRONMENT", "development"))
    debug = environment == "development" and _env_flag(os.getenv("DEBUG", "false"))

    tracker_config = TrackerConfig(
        default_cycle_length=int(os.getenv("DEFAULT_CYCLE_LENGTH", "28")),
        reminder_list_limit=int(os.getenv("REMINDER_LIST_LIMIT", "10")),
    )

    storage_config = StorageConfig(
        data_dir=Path(os.getenv("TRACKER_DATA_DIR", ".")).expanduser(),
        cycles_file=os.getenv("CYCLES_FILE", "cycles.csv"),
        logs_file=os.getenv("DAILY_LOGS_FILE", "daily_logs.csv"),
    )

    logging_config = LoggingConfig(
        level=_level_to_literal(os.getenv("LOG_LEVEL", "WARNING")),
        format="console" if environment == "development" else "json",
    )

    return AppConfig(
        environment=environment,
        debug=debug,
        tracker=tracker_config,
        storage=storage_config,
        logging=logging_config,
    )


@lru_cache
def get_config() -> AppConfig:
    """Get cached application configuration."""
    return load_config_from_env()


def configure_logging(config: LoggingConfig) -> None:
    """Route structlog through stdlib logging with the configured renderer."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, config.level),
        force=True,
    )

    renderer = (
        structlog.dev.ConsoleRenderer()
        if config.format == "console"
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Development helpers
def config_summary_rows(config: AppConfig) -> list[tuple[str, str]]:
    """Flatten the config into label/value pairs for display."""
    return [
        ("Environment", config.environment),
        ("Debug Mode", str(config.debug)),
        ("Log Level", config.logging.level),
        ("Log Format", config.logging.format),
        ("Default Cycle Length", f"{config.tracker.default_cycle_length} days"),
        ("Reminder List Limit", str(config.tracker.reminder_list_limit)),
        ("Cycles File", str(config.storage.cycles_path)),
        ("Daily Logs File", str(config.storage.logs_path)),
    ]
