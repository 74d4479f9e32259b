import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

MIN_PERCENT = 0
MAX_PERCENT = 100


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


def clamp_percent(value: int) -> int:
    """Clamp a percentage threshold into [0, 100].

    Example:
        >>> clamp_percent(150)
        100
        >>> clamp_percent(-5)
        0
    """
    return max(MIN_PERCENT, min(value, MAX_PERCENT))


class ThresholdConfig(BaseModel):
    """The six independent thresholds a build is judged against.

    Percentage thresholds are clamped into [0, 100] when the config is built.
    Response-time thresholds (ms) are kept verbatim, so a negative value
    disables them. A threshold only fires when it is non-negative.
    """

    model_config = ConfigDict(frozen=True)

    error_unstable: int = 0
    error_failed: int = 0
    perf_percent_unstable: int = 0
    perf_percent_failed: int = 0
    perf_time_unstable: int = -1
    perf_time_failed: int = -1

    @field_validator(
        "error_unstable",
        "error_failed",
        "perf_percent_unstable",
        "perf_percent_failed",
        mode="before",
    )
    @classmethod
    def validate_percent(cls, v) -> int:
        """Clamp percentage thresholds into [0, 100]."""
        try:
            value = int(v)
        except (ValueError, TypeError) as e:
            raise ValueError(f"threshold must be an integer, got {v!r}") from e
        clamped = clamp_percent(value)
        if clamped != value:
            logger.debug(f"Clamped percentage threshold {value} to {clamped}")
        return clamped

    @staticmethod
    def is_enabled(threshold: int) -> bool:
        return threshold >= 0


class ParserConfig(BaseModel):
    format: str
    glob: str

    @field_validator("glob")
    @classmethod
    def validate_glob(cls, v: str) -> str:
        """Validate glob is not blank."""
        if not v.strip():
            raise ValueError("glob must not be empty")
        return v


class PublisherConfig(BaseModel):
    thresholds: ThresholdConfig = Field(default_factory=ThresholdConfig)
    parsers: list[ParserConfig] = []


class Settings(BaseSettings):
    workspace: Path = Path(".")
    builds_dir: Path = Path("data/builds")
    config_path: Path = Path("perfgate.yaml")
    log_path: Path = Path("data/logs/perfgate.jsonl")

    model_config = SettingsConfigDict(
        env_prefix="PERFGATE_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )
