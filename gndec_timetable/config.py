"""Runtime settings loaded from environment variables.

Only the collaborators (fetch, persistence, CLI) read these; the parsing
core takes everything it needs as arguments.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class TimetableConfig(BaseSettings):
    """Settings loaded from ``GNDEC_TT_*`` environment variables or a .env file."""

    # Output locations
    output_dir: str = Field(
        default="web",
        description="Directory for published timetable_<dept>.json documents",
    )
    registry_dir: str = Field(
        default="web/group",
        description="Directory for per-department group registry files",
    )

    # Schedule conventions
    timezone: str = Field(
        default="Asia/Kolkata",
        description="Timezone the department timetables are published in",
    )
    lesson_duration_minutes: int = Field(
        default=50,
        description="Implicit length of one period",
    )

    # Fetch settings
    request_timeout: float = Field(
        default=30.0,
        description="Seconds before a department page request times out",
    )
    fetch_attempts: int = Field(
        default=3,
        description="Attempts for transient fetch failures before giving up",
    )
    fetch_backoff_seconds: float = Field(
        default=2.0,
        description="Fixed wait between fetch attempts",
    )
    user_agent: str = Field(
        default="Mozilla/5.0 (X11; Linux x86_64) gndec-timetable",
        description="User-Agent header sent to department sites",
    )

    # Logging
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format (for scheduled runs)",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    model_config = {
        "env_prefix": "GNDEC_TT_",
        "case_sensitive": False,
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


_config: TimetableConfig | None = None


def get_config() -> TimetableConfig:
    """Get the settings singleton."""
    global _config
    if _config is None:
        _config = TimetableConfig()
    return _config
