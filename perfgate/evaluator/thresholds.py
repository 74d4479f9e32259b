"""Classify a single report against the configured thresholds.

A report fails when its error rate exceeds ``error_failed``, or when its
response time regressed past *both* ``perf_percent_failed`` and
``perf_time_failed``::

    failure  = error_failed  fires OR (perf_percent_failed  fires AND perf_time_failed  fires)
    unstable = error_unstable fires OR (perf_percent_unstable fires AND perf_time_unstable fires)

Because the two performance conditions are joined with AND, a regression
measured only in percent can never trigger while the matching time threshold
is disabled. This combination is long-standing behavior and is kept as is.

A threshold fires when it is non-negative and the measured value exceeds it by
more than ``THRESHOLD_TOLERANCE``, which absorbs floating-point rounding.
Failure is checked first and wins over instability.
"""

from perfgate.common.config import ThresholdConfig
from perfgate.common.models import Outcome

THRESHOLD_TOLERANCE = 0.00000001


def threshold_fires(threshold: int, value: float) -> bool:
    """Whether ``value`` exceeds an enabled ``threshold``.

    Example:
        >>> threshold_fires(5, 10.0)
        True
        >>> threshold_fires(5, 5.0)
        False
        >>> threshold_fires(-1, 1000.0)
        False
    """
    return threshold >= 0 and threshold + THRESHOLD_TOLERANCE < value


def is_failure(
    error_percent: float,
    average_diff: float,
    average_diff_percent: float,
    config: ThresholdConfig,
) -> bool:
    return threshold_fires(config.error_failed, error_percent) or (
        threshold_fires(config.perf_percent_failed, average_diff_percent)
        and threshold_fires(config.perf_time_failed, average_diff)
    )


def is_unstable(
    error_percent: float,
    average_diff: float,
    average_diff_percent: float,
    config: ThresholdConfig,
) -> bool:
    return threshold_fires(config.error_unstable, error_percent) or (
        threshold_fires(config.perf_percent_unstable, average_diff_percent)
        and threshold_fires(config.perf_time_unstable, average_diff)
    )


def classify(
    error_percent: float,
    average_diff: float,
    average_diff_percent: float,
    config: ThresholdConfig,
) -> Outcome:
    """Classify one report's measurements.

    Args:
        error_percent: Percentage of failed samples
        average_diff: Change in average response time (ms) against the previous build
        average_diff_percent: The same change as a percentage
        config: Thresholds to judge against

    Returns:
        FAILURE, UNSTABLE or SUCCESS
    """
    if is_failure(error_percent, average_diff, average_diff_percent, config):
        return Outcome.FAILURE
    if is_unstable(error_percent, average_diff, average_diff_percent, config):
        return Outcome.UNSTABLE
    return Outcome.SUCCESS
