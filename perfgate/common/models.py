from datetime import UTC, datetime
from enum import Enum
from functools import partial

from pydantic import BaseModel, Field, field_validator

# Helper for timezone-aware timestamps
_utc_now = partial(datetime.now, tz=UTC)

PCT_CONVERSION_FACTOR = 100.0


class Outcome(str, Enum):
    """Three-level build classification, ordered SUCCESS < UNSTABLE < FAILURE.

    Example:
        >>> Outcome.FAILURE.is_worse_than(Outcome.UNSTABLE)
        True
        >>> Outcome.worst(Outcome.SUCCESS, Outcome.UNSTABLE)
        <Outcome.UNSTABLE: 'UNSTABLE'>
    """

    SUCCESS = "SUCCESS"
    UNSTABLE = "UNSTABLE"
    FAILURE = "FAILURE"

    @property
    def ordinal(self) -> int:
        return _OUTCOME_ORDER[self]

    def is_worse_than(self, other: "Outcome") -> bool:
        return self.ordinal > other.ordinal

    @classmethod
    def worst(cls, *outcomes: "Outcome") -> "Outcome":
        """Return the worst of the given outcomes, SUCCESS when none are given."""
        result = cls.SUCCESS
        for outcome in outcomes:
            if outcome.is_worse_than(result):
                result = outcome
        return result

    def __str__(self) -> str:
        return self.value


_OUTCOME_ORDER = {Outcome.SUCCESS: 0, Outcome.UNSTABLE: 1, Outcome.FAILURE: 2}


class Report(BaseModel):
    """One parsed performance result for one logical report file in one build.

    ``previous_report`` is the correlated report from the preceding build. It is
    excluded from serialization so a persisted report never drags the previous
    build's reports along with it.
    """

    report_file_name: str
    parser_name: str = ""
    error_percent: float = 0.0
    average_response_time: float = 0.0
    sample_count: int = 0
    build_number: int | None = None
    previous_report: "Report | None" = Field(default=None, exclude=True, repr=False)

    @field_validator("error_percent")
    @classmethod
    def validate_error_percent(cls, v: float) -> float:
        """Validate error_percent is between 0 and 100."""
        if not 0 <= v <= 100:
            msg = "error_percent must be between 0 and 100"
            raise ValueError(msg)
        return v

    def attach_previous(self, report: "Report") -> None:
        self.previous_report = report

    @property
    def average_diff(self) -> float:
        """Change in average response time (ms) against the previous build."""
        if self.previous_report is None:
            return 0.0
        return self.average_response_time - self.previous_report.average_response_time

    @property
    def average_diff_percent(self) -> float:
        """Change in average response time as a percentage of the previous average."""
        if self.previous_report is None:
            return 0.0
        previous_average = self.previous_report.average_response_time
        if previous_average == 0:
            return 0.0
        return self.average_diff * PCT_CONVERSION_FACTOR / previous_average


class BuildRecord(BaseModel):
    """What a build persists about itself next to its stored reports."""

    number: int
    outcome: Outcome = Outcome.SUCCESS
    has_performance_data: bool = False
    timestamp: datetime = Field(default_factory=_utc_now)
